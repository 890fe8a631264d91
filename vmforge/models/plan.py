from vmforge.extensions import db

# Catálogo padrão de planos (semeado pelo comando init-db)
PREDEFINED_PLANS = [
    {'id': 1, 'name': 'S', 'description': 'Small workloads',
     'ram': '2 GB', 'cpu_cores': '1', 'disk_size': '20 GB'},
    {'id': 2, 'name': 'M', 'description': 'Medium workloads',
     'ram': '4 GB', 'cpu_cores': '2', 'disk_size': '40 GB'},
    {'id': 3, 'name': 'L', 'description': 'Large workloads',
     'ram': '8 GB', 'cpu_cores': '4', 'disk_size': '80 GB'},
    {'id': 4, 'name': 'XL', 'description': 'Extra large workloads',
     'ram': '16 GB', 'cpu_cores': '8', 'disk_size': '160 GB'},
    {'id': 5, 'name': 'XXL', 'description': 'Heavy workloads',
     'ram': '32 GB', 'cpu_cores': '16', 'disk_size': '320 GB'},
    {'id': 6, 'name': 'XXXL', 'description': 'Enterprise workloads',
     'ram': '64 GB', 'cpu_cores': '32', 'disk_size': '640 GB'},
]


class Plan(db.Model):
    __tablename__ = 'plans'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    description = db.Column(db.String(255), nullable=False, default='')

    # Specs com unidade (ex: "4 GB"), no mesmo formato gravado na VM
    ram = db.Column(db.String(20), nullable=False)
    cpu_cores = db.Column(db.String(10), nullable=False)
    disk_size = db.Column(db.String(20), nullable=False)

    virtual_machines = db.relationship('VirtualMachine', backref='plan', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'ram': self.ram,
            'cpuCores': self.cpu_cores,
            'diskSize': self.disk_size
        }
