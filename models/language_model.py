from typing import Dict

from extensions import db  # type: ignore


class Language(db.Model):
    __tablename__ = "languages"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(8), nullable=False, unique=True)
    name = db.Column(db.String(64), nullable=False)

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name}
