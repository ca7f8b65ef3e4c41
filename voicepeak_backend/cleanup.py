import os
import shutil
from typing import Optional

from engines import SynthesisEngine


def cleanup_engine(engine: Optional[SynthesisEngine]) -> Optional[BaseException]:
    if engine is None:
        return None

    try:
        engine.cleanup()
    except BaseException as exc:  # pragma: no cover - asserted via main() behavior
        return exc
    return None


def cleanup_temp_dir(temp_dir: Optional[str]) -> Optional[BaseException]:
    if not temp_dir:
        return None

    try:
        if os.path.isdir(temp_dir):
            shutil.rmtree(temp_dir)
    except FileNotFoundError:
        return None
    except BaseException as exc:  # pragma: no cover - asserted via main() behavior
        return exc
    return None
