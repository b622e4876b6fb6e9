import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logic.work_orders.config import DEFAULT_TEMPLATE  # noqa: E402
from logic.work_orders.template import save_template  # noqa: E402


def main() -> int:
    args = [a for a in sys.argv[1:] if a != "--force"]
    force = "--force" in sys.argv[1:]
    out = Path(args[0]) if args else DEFAULT_TEMPLATE
    if out.exists() and not force:
        print(f"Ya existe {out}. Use --force para regenerarla.")
        return 1
    print("OK ->", save_template(out))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
