from vmforge.extensions import db
from datetime import datetime


class Client(db.Model):
    __tablename__ = 'clients'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    contact_name = db.Column(db.String(120))
    email = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    department = db.Column(db.String(120))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    virtual_machines = db.relationship('VirtualMachine', backref='client', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'contactName': self.contact_name,
            'email': self.email,
            'phone': self.phone,
            'department': self.department,
            'notes': self.notes,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
