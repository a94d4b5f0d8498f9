"""CI gate: the Alembic migration graph must stay a single linear chain.

A new migration must set down_revision to the current head. A second root
(down_revision = None) or a second head makes upgrade order ambiguous.

Usage:
  python .github/scripts/ci_alembic_heads_check.py
"""
from __future__ import annotations

import sys
from pathlib import Path

# Alembic needs the api directory on sys.path and the alembic.ini location.
api_root = Path(__file__).resolve().parents[2] / "apps" / "api"
sys.path.insert(0, str(api_root))

from alembic.config import Config
from alembic.script import ScriptDirectory


def main() -> int:
    cfg = Config(str(api_root / "alembic.ini"))
    cfg.set_main_option("script_location", str(api_root / "alembic"))

    script = ScriptDirectory.from_config(cfg)
    heads = sorted(script.get_heads())

    if len(heads) != 1:
        print("MIGRATION HEAD CHECK FAILED")
        print(f"  Expected exactly one head, found {len(heads)}: {heads}")
        print("  Fix: chain the new migration off the existing head, or add a merge revision.")
        return 1

    revisions = list(script.walk_revisions())
    roots = [r.revision for r in revisions if r.down_revision is None]

    if len(roots) != 1:
        print("MIGRATION ROOT CHECK FAILED")
        print(f"  Expected one root, found {len(roots)}: {sorted(roots)}")
        print("  Fix: new migrations must chain off an existing head, not use down_revision = None.")
        return 1

    print(f"Migration integrity check: OK (head {heads[0]}, {len(revisions)} total)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
