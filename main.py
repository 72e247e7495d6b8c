from __future__ import annotations

import os
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.entity_list_vm import EntityListVM
from app.views.main_window import MainWindow
from core.models import EntityKind
from core.profiles import get_profile
from core.services.slot_allocator import SlotAllocator
from infrastructure.api_client import ApiClient
from infrastructure.entity_gateway import HttpEntityGateway
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def main() -> int:
    settings = JsonSettings(os.environ.get("CONSOLE_SETTINGS", BASE_DIR / "settings.json"))
    init_logging(settings.get("logging.dir"), str(settings.get("logging.level", "INFO")))

    kind = EntityKind(sys.argv[1] if len(sys.argv) > 1 else EntityKind.ADVICES.value)
    token = os.environ.get("CONSOLE_TOKEN", "")
    if not token:
        logger.error("CONSOLE_TOKEN is not set")
        print("CONSOLE_TOKEN must hold a valid admin token.", file=sys.stderr)
        return 2

    app = QApplication(sys.argv)

    client = ApiClient(settings.base_url, timeout=settings.timeout)
    profile = get_profile(kind)
    vm = EntityListVM(
        profile,
        HttpEntityGateway.for_kind(client, kind),
        token,
        page_size=settings.page_size,
        default_sort=settings.sort_default(kind),
        on_logout=lambda: logger.warning("Session expired, closing the console"),
        categories_gateway=HttpEntityGateway.for_kind(client, EntityKind.CATEGORIES),
        slot_allocator=SlotAllocator(*settings.slot_range),
    )
    vm.load()

    win = MainWindow(vm)
    win.refresh()
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
