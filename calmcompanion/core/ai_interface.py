"""AI API Interface"""
from ..common_imports import *
from .. import config
from ..models.api_config import APIConfig
from ..models.chat_models import ChatMessage
from .errors import CompanionError, TransportError, MissingCredentialError, MalformedResponseError
from .prompt_formatter import format_messages_for_api

logger = logging.getLogger(__name__)

FALLBACK_TEMPLATE = "I'm having trouble reaching the assistant right now. ({mode}) Error: {error}"


@dataclass
class CompletionResult:
    """Outcome of one completion call: reply text or the error that stopped it"""
    mode: str  # "Proxy" or "Direct"
    content: str = ""
    error: Optional[CompanionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def display_text(self) -> str:
        """Reply text, or a readable description of the failure"""
        if self.ok:
            return self.content
        return FALLBACK_TEMPLATE.format(mode=self.mode, error=str(self.error))


def extract_reply(data: Any) -> str:
    """Pull choices[0].message.content; empty string when the field is missing"""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("⚠️ Completion response had no choices[0].message.content")
        return ""
    if not isinstance(content, str):
        logger.warning("⚠️ Completion content was not text: %r", type(content).__name__)
        return ""
    return content


class CompletionClient:
    """Sends the composed conversation to the proxy relay or straight to Groq"""

    def __init__(self, direct_url: Optional[str] = None, proxy_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.direct_url = direct_url or config.GROQ_URL
        self.proxy_url = proxy_url or config.PROXY_URL
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT

    def build_payload(self, history: List[ChatMessage], system_prompt: str,
                      settings: APIConfig) -> Dict[str, Any]:
        return {
            "messages": format_messages_for_api(history, system_prompt),
            **settings.generation_params(),
        }

    def complete(self, history: List[ChatMessage], system_prompt: str,
                 settings: APIConfig) -> CompletionResult:
        """Run one completion call; never raises"""
        mode = settings.mode_label
        try:
            payload = self.build_payload(history, system_prompt, settings)
            if settings.use_proxy:
                content = self._proxy_request(payload)
            else:
                content = self._direct_request(payload, settings.api_key)
            return CompletionResult(mode=mode, content=content)
        except CompanionError as e:
            logger.error("❌ Completion failed (%s): %s", mode, e)
            return CompletionResult(mode=mode, error=e)
        except requests.RequestException as e:
            logger.error("❌ Completion request failed (%s): %s", mode, e)
            return CompletionResult(mode=mode, error=TransportError(str(e)))
        except Exception as e:
            # e.g. UnicodeEncodeError from http.client for a non latin-1 key header
            logger.exception("❌ Unexpected completion error (%s)", mode)
            return CompletionResult(mode=mode, error=CompanionError(f"{type(e).__name__}: {e}"))

    def get_reply(self, history: List[ChatMessage], system_prompt: str,
                  settings: APIConfig) -> str:
        """Reply text, or the in-band fallback string when the call failed"""
        return self.complete(history, system_prompt, settings).display_text()

    def _proxy_request(self, payload: Dict[str, Any]) -> str:
        """Same-origin relay request; the relay adds the credential"""
        headers = {"Content-Type": "application/json"}
        response = requests.post(self.proxy_url, json=payload, headers=headers, timeout=self.timeout)
        return self._read_response(response, "Proxy error")

    def _direct_request(self, payload: Dict[str, Any], api_key: str) -> str:
        """Groq OpenAI-compatible request with a client-held key"""
        if not api_key.strip():
            raise MissingCredentialError()

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key.strip()}",
        }
        response = requests.post(self.direct_url, json=payload, headers=headers, timeout=self.timeout)
        return self._read_response(response, "Groq error")

    def _read_response(self, response: requests.Response, label: str) -> str:
        if not response.ok:
            body = response.text or ""
            raise TransportError(f"{label} {response.status_code} {body}".rstrip(),
                                 status=response.status_code, body=body)
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON from completion endpoint: {e}") from e
        return extract_reply(data)
