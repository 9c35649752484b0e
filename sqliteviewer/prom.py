from prometheus_client import CollectorRegistry

# Dedicated registry so tests and multiple app instances never collide
# with the process-global default registry.
REGISTRY = CollectorRegistry(auto_describe=True)
