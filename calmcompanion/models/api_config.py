"""API Configuration Models"""
from ..common_imports import *

DEFAULT_MODEL = "meta-llama/llama-4-maverick-17b-128e-instruct"
REDACTED_KEY = "***stored locally***"

TEMPERATURE_RANGE = (0.0, 2.0)
TOP_P_RANGE = (0.0, 1.0)
MAX_TOKENS_RANGE = (1, 4096)


def _to_float(value, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    # Infinity and NaN are valid JSON to Python's parser
    return number if math.isfinite(number) else default


def _to_int(value, default: int = 0) -> int:
    return int(_to_float(value, default))


def _clamp(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


@dataclass
class APIConfig:
    """Connection and generation settings for the completion endpoint"""
    api_key: str = ""
    use_proxy: bool = True  # Proxy mode keeps the key on the relay

    # Generation parameters
    temperature: float = 0.4
    top_p: float = 1.0
    max_tokens: int = 800
    model: str = DEFAULT_MODEL

    def __post_init__(self):
        self.api_key = str(self.api_key or "")
        self.use_proxy = _to_bool(self.use_proxy)
        self.temperature = _clamp(_to_float(self.temperature), TEMPERATURE_RANGE)
        self.top_p = _clamp(_to_float(self.top_p), TOP_P_RANGE)
        self.max_tokens = _clamp(_to_int(self.max_tokens), MAX_TOKENS_RANGE)
        self.model = str(self.model or DEFAULT_MODEL)

    @property
    def mode_label(self) -> str:
        return "Proxy" if self.use_proxy else "Direct"

    def generation_params(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "useProxy": self.use_proxy,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
            "model": self.model,
        }

    def to_export_dict(self) -> Dict[str, Any]:
        """Same as to_dict but never carries the secret"""
        data = self.to_dict()
        data["apiKey"] = REDACTED_KEY if self.api_key else ""
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["APIConfig"] = None) -> "APIConfig":
        """Merge stored/imported JSON over ``base`` (defaults when omitted)"""
        if not isinstance(data, dict):
            raise ValueError("settings must be an object")
        merged = (base or cls()).to_dict()
        merged.update({k: v for k, v in data.items() if k in merged})
        return cls(
            api_key=merged["apiKey"],
            use_proxy=merged["useProxy"],
            temperature=merged["temperature"],
            top_p=merged["top_p"],
            max_tokens=merged["max_tokens"],
            model=merged["model"],
        )


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)
