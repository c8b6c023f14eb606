from timecost.runtime.bundle import ensure_support_bundle
from timecost.runtime.file_io import write_bytes_atomic, write_text_atomic

__all__ = ["ensure_support_bundle", "write_bytes_atomic", "write_text_atomic"]
