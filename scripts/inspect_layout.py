import sys

from iconfix.dedupe.report import count_icons, find_duplicates, format_location
from iconfix.layout.errors import LayoutLoadError
from iconfix.storage.plist_store import PlistLayoutStore


def main(path: str) -> int:
    store = PlistLayoutStore(path)
    try:
        doc = store.load()
    except LayoutLoadError as exc:
        print(f"error={exc}")
        return 1

    dups = find_duplicates(doc)
    print(f"file={path} format={store.format}")
    print(f"dock={len(doc.dock)} pages={len(doc.pages)} icons={count_icons(doc)}")
    print(f"duplicated_identifiers={len(dups)} extra_copies={sum(len(v) - 1 for v in dups.values())}")
    for ident, locs in dups.items():
        print(f"  {ident}")
        for i, loc in enumerate(locs):
            tag = "keep" if i == 0 else "drop"
            print(f"    {tag}  {format_location(loc)}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1]))
