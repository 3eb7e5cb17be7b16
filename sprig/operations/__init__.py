"""Operations that build on the Sprig core."""

from .checkout import CheckoutEngine
from .diff import DiffEngine, FileDiff, sequence_diff
from .merge import MergeEngine, MergeResult
from .status import StatusReport, compute_status

__all__ = [
    'CheckoutEngine',
    'DiffEngine',
    'FileDiff',
    'sequence_diff',
    'MergeEngine',
    'MergeResult',
    'StatusReport',
    'compute_status',
]
