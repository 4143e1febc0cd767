"""
Seed data for development and first start.
Creates the admin account, restaurant info, a small demo menu and a
FlowTrak department/template pair.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from mooprompt_api.models import (
    Department,
    ExtraCharge,
    MenuCategory,
    MenuItem,
    Package,
    RestaurantInfo,
    Table,
    Template,
    TemplateCheckpoint,
    User,
)
from shared.config.constants import ChargeType, Roles
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.security.password import hash_password

logger = get_logger(__name__)


DEMO_TABLE_COUNT = 8

DEMO_MENU = {
    "ของทานเล่น": [
        {"name": "เฟรนช์ฟรายส์", "price": 59, "is_popular": True},
        {"name": "ไก่ทอด", "price": 89, "is_popular": True},
    ],
    "เนื้อสัตว์": [
        {"name": "หมูสามชั้น", "price": 129, "is_featured": True, "is_popular": True},
        {"name": "เนื้อวากิว", "price": 390, "is_free_in_buffet": False},
        {"name": "กุ้งแม่น้ำ", "price": 250, "is_free_in_buffet": False},
    ],
    "เครื่องดื่ม": [
        {"name": "น้ำเปล่า", "price": 15},
        {"name": "ชาไทย", "price": 45, "is_buffet_item": False},
    ],
}


def seed_admin(db: Session) -> User:
    """Create the default admin unless one with that username exists."""
    admin = db.scalar(select(User).where(User.username == settings.seed_admin_username))
    if admin:
        return admin

    admin = User(
        username=settings.seed_admin_username,
        name="Administrator",
        password_hash=hash_password(settings.seed_admin_password),
        role=Roles.ADMIN,
    )
    db.add(admin)
    db.flush()
    logger.info("Seeded admin user", user_id=admin.id)
    return admin


def seed_restaurant(db: Session) -> None:
    if db.scalar(select(RestaurantInfo.id).limit(1)):
        return
    db.add(RestaurantInfo(open_time="11:00", close_time="22:00"))


def seed_menu(db: Session) -> None:
    """Demo tables, menu, buffet package and service charge."""
    if db.scalar(select(MenuCategory.id).limit(1)):
        logger.info("Menu already seeded, skipping")
        return

    for number in range(1, DEMO_TABLE_COUNT + 1):
        db.add(Table(name=f"A{number}"))

    for category_name, items in DEMO_MENU.items():
        category = MenuCategory(name=category_name)
        db.add(category)
        db.flush()
        for item in items:
            db.add(MenuItem(category_id=category.id, **item))

    db.add(Package(name="บุฟเฟ่ต์หมูกระทะ", price_per_person=299, duration_minutes=120))
    db.add(ExtraCharge(name="ค่าน้ำแข็ง", price=10, charge_type=ChargeType.PER_PERSON))
    db.add(ExtraCharge(name="ค่าบริการ", price=50, charge_type=ChargeType.PER_SESSION))


def seed_workflow(db: Session) -> None:
    """Two departments and a two-step template for FlowTrak."""
    if db.scalar(select(Department.id).limit(1)):
        return

    sales = Department(name="ฝ่ายขาย")
    production = Department(name="ฝ่ายผลิต")
    db.add_all([sales, production])
    db.flush()

    template = Template(name="งานผลิตมาตรฐาน", description="รับออเดอร์ แล้วผลิต")
    db.add(template)
    db.flush()
    db.add_all(
        [
            TemplateCheckpoint(template_id=template.id, name="รับออเดอร์", owner_dept_id=sales.id, order=1),
            TemplateCheckpoint(template_id=template.id, name="ผลิต", owner_dept_id=production.id, order=2),
        ]
    )


def seed(db: Session) -> None:
    """
    Seed the database with initial data.
    Idempotent: each part only inserts when its data doesn't exist.
    """
    logger.info("Seeding database")
    seed_admin(db)
    seed_restaurant(db)
    seed_menu(db)
    seed_workflow(db)
    safe_commit(db)
    logger.info("Seeding complete")
