# minibooklet/src/minibooklet/app.py

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from minibooklet.gui.main_window import MainWindow

ORGANIZATION_NAME = "MiniBooklet"
APPLICATION_NAME = "Mini Booklet"


def register_application():
    """Organization and name that QSettings() stores the settings under."""
    QApplication.setOrganizationName(ORGANIZATION_NAME)
    QApplication.setApplicationName(APPLICATION_NAME)


def main():
    logging.basicConfig(
        level=os.environ.get("MINIBOOKLET_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    register_application()

    app = QApplication(sys.argv)

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
