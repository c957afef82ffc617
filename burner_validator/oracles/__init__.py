from burner_validator.oracles.debounce import DebounceOracle
from burner_validator.oracles.format_mx import DISPOSABLE_DOMAINS, FormatMxOracle, FormatMxResult
from burner_validator.oracles.reacher import ReacherClient, ReacherResponse

__all__ = [
    "DISPOSABLE_DOMAINS",
    "DebounceOracle",
    "FormatMxOracle",
    "FormatMxResult",
    "ReacherClient",
    "ReacherResponse",
]
