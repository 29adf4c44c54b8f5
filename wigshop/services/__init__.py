# wigshop/services/__init__.py
from dataclasses import dataclass

from flask import current_app

@dataclass
class Shop:
    gateway: object
    notifier: object
    tracker: object
    dispatcher: object

def shop() -> Shop:
    return current_app.extensions["shop"]
