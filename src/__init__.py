"""
image-sizes - Kubernetes Pod Image Size Reporter

Resolves the container images of Kubernetes pods to their platform-specific
manifest digest and total layer size, for a pod, a namespace, or a cluster.
"""

__version__ = "1.0.0"
