from vmforge.extensions import db, bcrypt
from datetime import datetime

ROLES = ('admin', 'operator', 'viewer')


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    full_name = db.Column(db.String(120))
    email = db.Column(db.String(120))

    # Papel define o que o operador pode fazer:
    # admin (tudo), operator (cria VMs), viewer (somente leitura)
    role = db.Column(db.String(20), nullable=False, default='operator')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    virtual_machines = db.relationship('VirtualMachine', backref='owner', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        # password_hash nunca é serializado
        return {
            'id': self.id,
            'username': self.username,
            'fullName': self.full_name,
            'email': self.email,
            'role': self.role,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
