# Opções oferecidas pelo wizard de criação (GET /api/catalog/options)

OS_OPTIONS = [
    {'value': 'ubuntu-20.04', 'label': 'Ubuntu 20.04 LTS'},
    {'value': 'ubuntu-22.04', 'label': 'Ubuntu 22.04 LTS'},
    {'value': 'centos-7', 'label': 'CentOS 7'},
    {'value': 'centos-8', 'label': 'CentOS 8'},
    {'value': 'windows-server-2019', 'label': 'Windows Server 2019'},
    {'value': 'windows-server-2022', 'label': 'Windows Server 2022'},
    {'value': 'windows-10', 'label': 'Windows 10'},
    {'value': 'windows-11', 'label': 'Windows 11'},
]

NETWORK_OPTIONS = [
    {'value': 'prod-net', 'label': 'Production Network'},
    {'value': 'dev-net', 'label': 'Development Network'},
    {'value': 'test-net', 'label': 'Test Network'},
    {'value': 'dmz-net', 'label': 'DMZ Network'},
]

PROXMOX_STORAGE_OPTIONS = ['local-lvm', 'local-zfs', 'ceph-pool', 'nfs-storage']
PROXMOX_NODE_OPTIONS = ['node1', 'node2', 'node3']

VCENTER_DATASTORE_OPTIONS = ['ds-ssd-01', 'ds-ssd-02', 'ds-sas-01', 'ds-sas-02']
VCENTER_CLUSTER_OPTIONS = ['prod-cluster', 'dev-cluster', 'test-cluster']
VCENTER_RESOURCE_POOL_OPTIONS = [
    {'value': 'high', 'label': 'High Priority'},
    {'value': 'medium', 'label': 'Medium Priority'},
    {'value': 'low', 'label': 'Low Priority'},
]
VCENTER_FOLDER_OPTIONS = [
    {'value': 'web-servers', 'label': 'Web Servers'},
    {'value': 'app-servers', 'label': 'App Servers'},
    {'value': 'db-servers', 'label': 'DB Servers'},
    {'value': 'utility-servers', 'label': 'Utility Servers'},
]

DISK_TYPES = ('ssd', 'hdd')


def get_options():
    return {
        'operatingSystems': OS_OPTIONS,
        'networks': NETWORK_OPTIONS,
        'diskTypes': list(DISK_TYPES),
        'proxmox': {
            'storages': PROXMOX_STORAGE_OPTIONS,
            'nodes': PROXMOX_NODE_OPTIONS
        },
        'vcenter': {
            'datastores': VCENTER_DATASTORE_OPTIONS,
            'clusters': VCENTER_CLUSTER_OPTIONS,
            'resourcePools': VCENTER_RESOURCE_POOL_OPTIONS,
            'folders': VCENTER_FOLDER_OPTIONS
        }
    }
