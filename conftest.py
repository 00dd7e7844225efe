from __future__ import annotations

import os

import django


os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tidewatch.settings")

django.setup()
