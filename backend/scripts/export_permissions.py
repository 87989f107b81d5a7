#!/usr/bin/env python
"""Export the role/action permission table for non-Python clients.

Usage:
    python backend/scripts/export_permissions.py            # rewrite shared/permission_table.json
    python backend/scripts/export_permissions.py --check    # exit 4 if the file is stale
    python backend/scripts/export_permissions.py --out -    # print to stdout
"""
from __future__ import annotations
import os, sys, argparse, json, hashlib

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from postgate.constants.permissions import permission_table_payload  # type: ignore

DEFAULT_OUT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', 'shared', 'permission_table.json'))


def render() -> str:
    return json.dumps({'roles': permission_table_payload()}, indent=2, sort_keys=True) + '\n'


def checksum(text: str) -> str:
    canonical = json.dumps(json.loads(text), sort_keys=True, separators=(',', ':'))
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


def parse_args():
    p = argparse.ArgumentParser(description="Export the permission table as JSON")
    p.add_argument('--out', default=DEFAULT_OUT, metavar='FILE', help="Output path, '-' for stdout")
    p.add_argument('--check', action='store_true', help='Compare with FILE instead of writing; exit 4 on mismatch')
    return p.parse_args()


def main():
    args = parse_args()
    rendered = render()
    if args.check:
        try:
            with open(args.out, encoding='utf-8') as f:
                current = f.read()
        except FileNotFoundError:
            print(f"[CHECK] MISSING: {args.out}")
            sys.exit(4)
        if checksum(current) != checksum(rendered):
            print(f"[CHECK] STALE: {args.out} differs from the in-code table; re-run without --check")
            sys.exit(4)
        print(f"[CHECK] OK: {checksum(rendered)}")
        return
    if args.out == '-':
        sys.stdout.write(rendered)
        return
    os.makedirs(os.path.dirname(args.out), exist_ok=True)
    with open(args.out, 'w', encoding='utf-8') as f:
        f.write(rendered)
    print(f"[INFO] Exported permission table to {args.out}")


if __name__ == '__main__':
    main()
