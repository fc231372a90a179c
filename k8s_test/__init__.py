"""Status page showing what a pod sees of its Kubernetes environment."""
