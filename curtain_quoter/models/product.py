from curtain_quoter import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), nullable=False, unique=True)

    def __repr__(self):
        return f"<Product id={self.id} code={self.code} name={self.name}>"


class ProductFabric(db.Model):
    """製品（システム）ごとに選択可能な生地の対応表"""

    __tablename__ = "product_fabrics"

    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    fabric_id = db.Column(db.Integer, db.ForeignKey("fabrics.id", ondelete="CASCADE"), primary_key=True)
