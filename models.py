import uuid
from decimal import Decimal
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Numeric
from werkzeug.security import generate_password_hash, check_password_hash

db = SQLAlchemy()


def new_id():
    return str(uuid.uuid4())


class Product(db.Model):
    __tablename__ = "products"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(Numeric(10, 2), nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    sizes = db.Column(db.JSON, nullable=False, default=list)
    colors = db.Column(db.JSON, nullable=False, default=list)
    category = db.Column(db.Text, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    featured = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            # string keeps the two decimals exact on the wire
            "price": f"{Decimal(str(self.price)):.2f}",
            "images": list(self.images or []),
            "sizes": list(self.sizes or []),
            "colors": list(self.colors or []),
            "category": self.category,
            "stock": self.stock,
            "featured": bool(self.featured),
        }


class Admin(db.Model):
    __tablename__ = "admins"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(191), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="ADMIN")
    def set_password(self, p): self.password_hash = generate_password_hash(p)
    def check_password(self, p): return check_password_hash(self.password_hash, p)

    def public(self):
        return {"id": self.id, "username": self.username}


class Configuration(db.Model):
    __tablename__ = "configuration"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    key = db.Column(db.String(191), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)

    def to_dict(self):
        return {"id": self.id, "key": self.key, "value": self.value}
