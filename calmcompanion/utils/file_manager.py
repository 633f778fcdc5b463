"""File management utilities"""
from ..common_imports import *
from .. import config

logger = logging.getLogger(__name__)

# Logical slots; each one is a single JSON file under the data directory
SLOT_MESSAGES = "messages"
SLOT_PROFILE = "profile"
SLOT_SETTINGS = "settings"
SLOT_THEME = "theme"
SLOT_JOURNAL = "journal"

SLOTS = (SLOT_MESSAGES, SLOT_PROFILE, SLOT_SETTINGS, SLOT_THEME, SLOT_JOURNAL)


def get_app_data_dir() -> Path:
    """Get application data directory - LOCAL PROJECT STORAGE unless CALM_DATA_DIR is set"""
    if config.DATA_DIR:
        app_dir = Path(config.DATA_DIR).expanduser()
    else:
        # Project root is two levels above this file: calmcompanion/utils/file_manager.py
        project_root = Path(__file__).parent.parent.parent
        app_dir = project_root / "data"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class LocalStore:
    """Key-value persistence scoped to one data directory and namespace"""

    def __init__(self, root_dir: Optional[Union[str, Path]] = None, namespace: Optional[str] = None):
        self.root_dir = Path(root_dir) if root_dir else get_app_data_dir()
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.namespace = namespace or config.STORAGE_NAMESPACE

    def path_for(self, slot: str) -> Path:
        return self.root_dir / f"{self.namespace}_{slot}.json"

    def load(self, slot: str, fallback: Any = None) -> Any:
        """Stored value for ``slot``, or ``fallback`` if missing or unreadable"""
        path = self.path_for(slot)
        if not path.exists():
            return fallback

        data = safe_json_load(path)
        if data is None:
            logger.warning("⚠️ Could not read %s, using defaults", path.name)
            return fallback
        return data

    def save(self, slot: str, value: Any) -> bool:
        """Write ``value``; failures are logged and reported, never raised"""
        saved = safe_json_save(value, self.path_for(slot))
        if saved:
            logger.debug("✅ Saved %s", slot)
        else:
            logger.error("❌ Error saving %s to %s", slot, self.root_dir)
        return saved

    def snapshot(self) -> Dict[str, Any]:
        """Raw contents of every slot that currently exists"""
        return {slot: self.load(slot) for slot in SLOTS if self.path_for(slot).exists()}
