from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError

from modules.catalog.dtos import CreateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.services import ProductService
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.services import StockService

_PEXELS = "https://images.pexels.com/photos/{}?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=1"

RICE_CATALOG = [
    ("Basmati Rice", "Long-grain, aromatic rice for Biryani.", 100, "Biryani",
     _PEXELS.format("723043/pexels-photo-723043.jpeg")),
    ("Jasmine Rice", "Fragrant rice, ideal for Asian dishes.", 150, "General",
     _PEXELS.format("17575133/pexels-photo-17575133/free-photo-of-cooked-rice-with-spices.jpeg")),
    ("Red Rice", "Nutritious rice with a nutty flavor.", 200, "General",
     _PEXELS.format("5949281/pexels-photo-5949281.jpeg")),
    ("Mogra Rice", "Broken Basmati, good for kheer.", 250, "General",
     "https://www.vegrecipesofindia.com/wp-content/uploads/2021/05/basmati-rice-2.jpg"),
    ("Brown Rice", "Whole grain rice, high in fiber.", 300, "General",
     _PEXELS.format("162397/famine-grain-rice-brown-rice-162397.jpeg")),
    ("Black Rice", "Forbidden rice, rich in antioxidants.", 350, "General",
     "/images/black-rice.jpeg"),
    ("Sona Masuri Rice", "Lightweight and aromatic, for daily use.", 400, "General",
     "https://static.toiimg.com/thumb/60915309.cms?width=1200&height=900"),
    ("Ambemohar Rice", "Fragrant short-grain rice from Maharashtra.", 450, "General",
     "https://prabhatdairy.in/wp-content/uploads/2023/08/Govindbhog-Rice.webp"),
    ("Kala Jeera Rice (Jeerakasala)", "Short-grain aromatic rice for pulao/biryani.", 500,
     "Biryani", "/images/kala-jeera-rice.jpeg"),
    ("Bamboo Rice", "Unique rice grown from bamboo shoots.", 550, "General",
     "/images/bamboo-rice.jpeg"),
    ("Premium Idly Rice", "Parboiled rice perfect for soft, fluffy idlis.", 120, "Idly",
     "https://www.shasthaonline.com/images/thumbs/0000079_idli-rice_600.jpeg"),
    ("Crispy Dosa Rice", "Raw rice blend ideal for making crispy dosas.", 110, "Dosa",
     "/images/dosa-rice.jpeg"),
    ("Seeraga Samba Rice", "Tiny aromatic rice, for South Indian Biryani.", 180, "Biryani",
     "https://sargramostav.sargakshetra.org/public//storage/products/52372194385675.jpg"),
]


class Command(BaseCommand):
    help = "Seed the rice catalog (and optionally stock) for development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--stock",
            type=int,
            default=0,
            help="Populate every seeded product with this many kg.",
        )

    def handle(self, *args, **options):
        stock_kg = options["stock"]
        if stock_kg < 0:
            raise CommandError("--stock must not be negative.")

        stock_service = StockService(repository=StockDjangoRepository())
        products = ProductService(
            repository=ProductDjangoRepository(), stock_service=stock_service
        )

        self.stdout.write("Seeding rice catalog...")
        created = skipped = 0
        for name, description, price, category, image_url in RICE_CATALOG:
            dto = CreateProductDTO(
                name=name,
                description=description,
                original_price=Decimal(price),
                image_url=image_url,
                category=category,
            )
            try:
                products.create_product(dto)
                created += 1
            except ProductAlreadyExists:
                skipped += 1
                continue

            if stock_kg:
                stock_service.populate(name, stock_kg)

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products_created={created}, "
                f"products_skipped={skipped}, stock_per_product={stock_kg}kg"
            )
        )
