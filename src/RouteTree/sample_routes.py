"""Reference route list used by the CLI ``--sample`` flag and the app."""

from __future__ import annotations

from RouteTree.models import TreeNode

SAMPLE_ROUTES: list[str] = [
    "products",
    "products/station",
    "products/station/with-mini",
    "products/mini",
    "products/mini/wifi",
    "products/mini/wifi/with-flex",
    "products/mini/lte",
    "products/mini/lte/with-flex",
    "integrations",
    "integrations/partners",
    "careers",
]

SAMPLE_TREE: TreeNode = {
    "products": {
        "station": {"with-mini": {}},
        "mini": {
            "wifi": {"with-flex": {}},
            "lte": {"with-flex": {}},
        },
    },
    "integrations": {"partners": {}},
    "careers": {},
}
