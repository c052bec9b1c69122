import django.core.validators
import uuid6
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RiceProduct",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200, unique=True)),
                ("description", models.TextField()),
                (
                    "original_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.01"))
                        ],
                    ),
                ),
                (
                    "discount_percentage",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("image_url", models.CharField(max_length=500)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Biryani", "Biryani"),
                            ("Idly", "Idly"),
                            ("Dosa", "Dosa"),
                            ("General", "General"),
                        ],
                        default="General",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "db_table": "rice_products",
                "ordering": ["category", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(original_price__gt=0),
                        name="rice_products_price_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(discount_percentage__gte=0)
                        & models.Q(discount_percentage__lte=100),
                        name="rice_products_discount_range",
                    ),
                ],
            },
        ),
    ]
