from curtain_quoter import db


class Fabric(db.Model):
    __tablename__ = "fabrics"

    id = db.Column(db.Integer, primary_key=True)
    color_name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(50), nullable=False)
    collection = db.Column(db.String(100), nullable=False, index=True)
    system_code = db.Column(db.String(50), nullable=True)

    def __repr__(self):
        return f"<Fabric id={self.id} collection={self.collection} code={self.code}>"
