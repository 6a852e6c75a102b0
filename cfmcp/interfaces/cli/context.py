"""Compose the setup service from resolved settings.

The CLI commands never construct adapters themselves; they call
:func:`build_setup_service`, which tests replace to inject fakes.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path
from typing import Mapping

from requests import Session

from cfmcp.app.config import SetupSettings, load_settings
from cfmcp.infrastructure.wrangler import run_login
from cfmcp.services.auth import AuthService, LoginRunner
from cfmcp.services.setup import SetupService, Which

from .auth import build_api_client, build_wrangler_auth


def resolve_settings(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    platform: str | None = None,
) -> SetupSettings:
    """Load settings for the current user unless overrides are given."""

    return load_settings(
        os.environ if environ is None else environ,
        home=home or Path.home(),
        platform=platform or sys.platform,
    )


def build_setup_service(
    settings: SetupSettings,
    *,
    login_runner: LoginRunner = run_login,
    session: Session | None = None,
    which: Which = shutil.which,
) -> SetupService:
    """Wire the auth, account and client configuration steps together."""

    wrangler = build_wrangler_auth(settings, session=session)
    auth_service = AuthService(
        wrangler, login_command=settings.login_command, login_runner=login_runner
    )
    return SetupService(
        auth_service=auth_service,
        client_factory=lambda token: build_api_client(settings, token, session=session),
        client_paths=settings.client_paths,
        python_names=settings.python_names,
        which=which,
    )
