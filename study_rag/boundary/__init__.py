"""
Boundary layer: adapters for vector indexes, generative models, the
external processing service and the relational document store.
"""
