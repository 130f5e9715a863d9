from .keys import ThreadIdFactory, random_thread_id, stable_hash, stable_thread_id

__all__ = [
    "ThreadIdFactory",
    "stable_hash",
    "random_thread_id",
    "stable_thread_id",
]
