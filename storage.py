"""Repository functions over products, admins and configuration.

Read-one and update return ``None`` for unknown ids instead of raising;
routes decide what a missing record means for the caller.
"""
from decimal import Decimal

from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from models import db, Product, Admin, Configuration, new_id

PRODUCT_FIELDS = ("name", "description", "price", "images", "sizes", "colors",
                  "category", "stock", "featured")

# ---------- Products ----------

def list_products():
    return Product.query.all()


def get_product(product_id):
    return db.session.get(Product, product_id)


def _apply_product_fields(product, data):
    for field in PRODUCT_FIELDS:
        value = data[field] if field in data else getattr(product, field)
        if field == "price":
            value = Decimal(str(value))
        elif field in ("images", "sizes", "colors"):
            value = list(value)
        setattr(product, field, value)


def create_product(data):
    product = Product(id=new_id(), featured=False)
    _apply_product_fields(product, data)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(product_id, data):
    product = get_product(product_id)
    if product is None:
        return None
    _apply_product_fields(product, data)
    db.session.commit()
    return product


def delete_product(product_id):
    product = get_product(product_id)
    if product is None:
        return False
    db.session.delete(product)
    db.session.commit()
    return True

# ---------- Admins ----------

def get_admin(admin_id):
    return db.session.get(Admin, admin_id)


def get_admin_by_username(username):
    return Admin.query.filter_by(username=username).first()


def create_admin(username, password, role="ADMIN"):
    admin = Admin(id=new_id(), username=username, role=role)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    return admin

# ---------- Configuration ----------

def list_configuration():
    return Configuration.query.all()


def get_configuration(key):
    return Configuration.query.filter_by(key=key).first()


def _upsert_statement(dialect, key, value):
    row = {"id": new_id(), "key": key, "value": value}
    if dialect == "sqlite":
        stmt = sqlite_insert(Configuration).values(**row)
        return stmt.on_conflict_do_update(index_elements=["key"], set_={"value": value})
    if dialect == "postgresql":
        stmt = pg_insert(Configuration).values(**row)
        return stmt.on_conflict_do_update(index_elements=["key"], set_={"value": value})
    if dialect in ("mysql", "mariadb"):
        return mysql_insert(Configuration).values(**row).on_duplicate_key_update(value=value)
    return None


def set_configuration(key, value):
    """Insert ``key`` or replace its value, as one statement where the dialect allows."""
    stmt = _upsert_statement(db.session.get_bind().dialect.name, key, value)
    if stmt is not None:
        db.session.execute(stmt)
        db.session.commit()
        return get_configuration(key)

    for attempt in range(2):
        entry = get_configuration(key)
        if entry is None:
            entry = Configuration(id=new_id(), key=key, value=value)
            db.session.add(entry)
        else:
            entry.value = value
        try:
            db.session.commit()
            return entry
        except IntegrityError:
            # another writer inserted the key first; retry as an update
            db.session.rollback()
            if attempt:
                raise
