"""Shop repository - Database operations for products, variants and orders"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Order, OrderItem, Product, ProductVariant


class ShopRepository:
    """Repository for storefront database operations"""

    @staticmethod
    def get_active_products(db: Session, product_ids: list[str]) -> list[Product]:
        if not product_ids:
            return []
        return (
            db.query(Product)
            .filter(Product.id.in_(product_ids), Product.is_active.is_(True))
            .all()
        )

    @staticmethod
    def get_product(db: Session, product_id: str) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def get_variants(db: Session, variant_ids: list[str]) -> list[ProductVariant]:
        if not variant_ids:
            return []
        return db.query(ProductVariant).filter(ProductVariant.id.in_(variant_ids)).all()

    @staticmethod
    def get_variant(db: Session, variant_id: str) -> Optional[ProductVariant]:
        return db.query(ProductVariant).filter(ProductVariant.id == variant_id).first()

    @staticmethod
    def list_variants(db: Session, product_id: str) -> list[ProductVariant]:
        """Variants of a product, oldest first"""
        return (
            db.query(ProductVariant)
            .filter(ProductVariant.product_id == product_id)
            .order_by(ProductVariant.created_at.asc())
            .all()
        )

    @staticmethod
    def create_variant(db: Session, product_id: str, **fields) -> ProductVariant:
        variant = ProductVariant(product_id=product_id, **fields)
        db.add(variant)
        db.commit()
        db.refresh(variant)
        return variant

    @staticmethod
    def update_variant(db: Session, variant: ProductVariant, **fields) -> ProductVariant:
        for key, value in fields.items():
            setattr(variant, key, value)
        db.commit()
        db.refresh(variant)
        return variant

    @staticmethod
    def delete_variant(db: Session, variant: ProductVariant) -> None:
        db.delete(variant)
        db.commit()

    @staticmethod
    def create_order(
        db: Session,
        total_amount: float,
        items: list[dict],
        client_id: Optional[str] = None,
        client_email: Optional[str] = None,
    ) -> Order:
        """Insert an order with its items in one transaction"""
        order = Order(
            client_id=client_id,
            client_email=client_email,
            total_amount=total_amount,
            status="pending",
            payment_status="pending",
        )
        order.items = [OrderItem(**item) for item in items]
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def get_order(db: Session, order_id: str) -> Optional[Order]:
        return db.query(Order).filter(Order.id == order_id).first()

    @staticmethod
    def update_order(db: Session, order: Order, **fields) -> Order:
        for key, value in fields.items():
            setattr(order, key, value)
        db.commit()
        db.refresh(order)
        return order
