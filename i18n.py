"""Translation bundles for the supported locales.

Bundles are JSON files laid out as ``locales/<locale>/<namespace>.json``.
"""

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)

SUPPORTED_LOCALES = ("en", "ms", "zh")
DEFAULT_LOCALE = "en"
DEFAULT_NAMESPACE = "common"
LOCALE_NAMES = {
    "en": "English",
    "ms": "Bahasa Melayu",
    "zh": "中文",
}

DEFAULT_LOCALES_DIR = Path(__file__).resolve().parent / "locales"


class UnsupportedLocaleError(ValueError):
    pass


class MissingBundleError(LookupError):
    pass


def _bundle_path(locales_dir, locale, namespace):
    return Path(locales_dir) / locale / f"{namespace}.json"


def load_bundle(locale, namespace, locales_dir=DEFAULT_LOCALES_DIR):
    """Load one locale/namespace bundle, falling back to the default locale."""
    path = _bundle_path(locales_dir, locale, namespace)
    if not path.exists() and locale != DEFAULT_LOCALE:
        log.warning("No %s bundle for locale %r, using %r", namespace, locale, DEFAULT_LOCALE)
        path = _bundle_path(locales_dir, DEFAULT_LOCALE, namespace)
    if not path.exists():
        raise MissingBundleError(f"Missing translation bundle: {locale}/{namespace}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def get_server_side_translations(locale, namespaces=None, locales_dir=DEFAULT_LOCALES_DIR):
    """Load the bundles a page needs and return them as template props.

    Raises UnsupportedLocaleError for a locale outside SUPPORTED_LOCALES and
    MissingBundleError when neither the locale nor the default locale has a
    bundle for a namespace.
    """
    if locale not in SUPPORTED_LOCALES:
        raise UnsupportedLocaleError(f"Unsupported locale: {locale!r}")
    namespaces = list(namespaces or [DEFAULT_NAMESPACE])
    resources = {ns: load_bundle(locale, ns, locales_dir) for ns in namespaces}
    return {
        "_translations": {
            "locale": locale,
            "namespaces": namespaces,
            "resources": {locale: resources},
        }
    }


def get_i18n_paths():
    return [{"params": {"locale": locale}} for locale in SUPPORTED_LOCALES]


class Translator:
    """Look up strings in the props returned by get_server_side_translations.

    Keys are dotted paths, optionally prefixed with a namespace:
    ``t("pages.goals.title")`` or ``t("common:pages.goals.title")``.
    Unknown keys come back unchanged.
    """

    def __init__(self, props):
        data = props["_translations"]
        self.locale = data["locale"]
        self.namespaces = data["namespaces"]
        self._resources = data["resources"][self.locale]

    def __call__(self, key, **params):
        return self.t(key, **params)

    def t(self, key, **params):
        namespace, _, path = key.rpartition(":")
        namespace = namespace or self.namespaces[0]
        node = self._resources.get(namespace, {})
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return key
            node = node[part]
        if not isinstance(node, str):
            return key
        return node.format(**params) if params else node
