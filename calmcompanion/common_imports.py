"""
Common imports file for CalmCompanion
Import this file in other modules to get all standard imports
"""

# ========== 1. STANDARD LIBRARY IMPORTS ==========
import sys
import os
import json
import math
import time
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Any, Callable, Union
from dataclasses import dataclass, asdict, field, replace

# ========== 2. THIRD-PARTY IMPORTS ==========
import requests

# ========== 3. UTILITY FUNCTIONS ==========
def get_timestamp() -> int:
    """Current instant as epoch milliseconds"""
    return int(time.time() * 1000)

def safe_json_load(file_path: Union[str, Path]) -> Optional[Any]:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError):
        return None

def safe_json_save(data: Any, file_path: Union[str, Path]) -> bool:
    file_path = Path(file_path)
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, file_path)
        return True
    except (OSError, TypeError, ValueError):
        tmp_path.unlink(missing_ok=True)
        return False
