# app/data/seed.py
from decimal import Decimal

from app.data.database import Base, SessionLocal, engine
from app.data.models import ProductModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

# (nazwa, opis, cena, marka, model, przebieg, paliwo, skrzynia, silnik, kolor, slug obrazkow, ile obrazkow)
CARS = [
    ("Toyota Camry 2023", "Reliable sedan with excellent fuel economy and safety features",
     "25000.00", "Toyota", "Camry", 15000, "Gasoline", "Automatic", "2.5L", "White", "camry", 3),
    ("Honda Civic 2023", "Sporty compact car with great handling and modern technology",
     "22000.00", "Honda", "Civic", 12000, "Gasoline", "Automatic", "1.5L Turbo", "Blue", "civic", 2),
    ("Ford Mustang 2023", "Iconic muscle car with powerful performance and classic styling",
     "45000.00", "Ford", "Mustang", 8000, "Gasoline", "Manual", "5.0L V8", "Red", "mustang", 3),
    ("BMW 3 Series 2023", "Luxury sedan with premium features and excellent driving dynamics",
     "55000.00", "BMW", "3 Series", 5000, "Gasoline", "Automatic", "2.0L Turbo", "Black", "bmw3", 2),
    ("Tesla Model 3 2023", "Electric vehicle with cutting-edge technology and instant acceleration",
     "42000.00", "Tesla", "Model 3", 3000, "Electric", "Single-speed", "Dual Motor", "Silver", "tesla3", 3),
    ("Mercedes-Benz C-Class 2023", "Premium luxury sedan with sophisticated design and advanced features",
     "48000.00", "Mercedes-Benz", "C-Class", 7000, "Gasoline", "Automatic", "2.0L Turbo", "White", "mercedes-c", 2),
    ("Audi A4 2023", "Sporty luxury sedan with quattro all-wheel drive and premium interior",
     "46000.00", "Audi", "A4", 6000, "Gasoline", "Automatic", "2.0L Turbo", "Gray", "audi-a4", 2),
    ("Lexus ES 2023", "Comfortable luxury sedan with exceptional reliability and smooth ride",
     "44000.00", "Lexus", "ES", 4000, "Gasoline", "Automatic", "2.5L", "Black", "lexus-es", 2),
    ("Volkswagen Golf GTI 2023", "Hot hatch with sporty performance and practical daily usability",
     "32000.00", "Volkswagen", "Golf GTI", 9000, "Gasoline", "Manual", "2.0L Turbo", "Red", "golf-gti", 2),
    ("Subaru Outback 2023", "Versatile crossover with all-wheel drive and excellent safety ratings",
     "38000.00", "Subaru", "Outback", 11000, "Gasoline", "Automatic", "2.5L", "Green", "outback", 2),
]


def build_products() -> list[ProductModel]:
    products = []
    for (name, description, price, brand, model, mileage, fuel, transmission,
         engine_size, color, slug, images) in CARS:
        products.append(
            ProductModel(
                name=name,
                description=description,
                price=Decimal(price),
                brand=brand,
                model=model,
                year=2023,
                mileage=mileage,
                fuel_type=fuel,
                transmission=transmission,
                engine_size=engine_size,
                color=color,
                image_urls=[f"https://example.com/{slug}-{n}.jpg" for n in range(1, images + 1)],
                in_stock=True,
            )
        )
    return products


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            logger.info("Products already present, skipping seed")
            return
        db.add_all(build_products())
        db.commit()
        logger.info(f"Seeded {len(CARS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
