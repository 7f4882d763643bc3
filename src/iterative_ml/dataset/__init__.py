from .base import Dataset, EventStream, future_from_callback, future_from_stream
from .local import LocalContext, LocalDataset
from .synthetic import random_svm_data, random_svm_line, svm_label

__all__ = [
    "Dataset",
    "EventStream",
    "future_from_callback",
    "future_from_stream",
    "LocalContext",
    "LocalDataset",
    "random_svm_data",
    "random_svm_line",
    "svm_label",
]
