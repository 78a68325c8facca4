from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="WorldState",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=512, unique=True)),
                ("value", models.BinaryField()),
                ("updated_tx", models.CharField(blank=True, default="", max_length=64)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="KeyEndorsement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=512, unique=True)),
                ("organizations", models.JSONField(default=list)),
            ],
        ),
        migrations.CreateModel(
            name="PrivateData",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("collection", models.CharField(max_length=128)),
                ("key", models.CharField(max_length=512)),
                ("value", models.BinaryField()),
                ("value_hash", models.CharField(max_length=64)),
            ],
            options={
                "unique_together": {("collection", "key")},
            },
        ),
        migrations.CreateModel(
            name="ChaincodeEvent",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("tx_id", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(max_length=64)),
                ("payload", models.JSONField(default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
    ]
