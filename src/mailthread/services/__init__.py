from .doctor import run_doctor_checks
from .exporter import export_threads, thread_summary

__all__ = ["export_threads", "run_doctor_checks", "thread_summary"]
