#!/usr/bin/env python3
"""Clean up orphaned uploads and expired sessions.

Upload directories are created before a marker is saved, so an interrupted
or failed marker creation can leave a directory under data/uploads that no
marker refers to. This script removes such directories and purges expired
entries from sessions.json. Directories modified within the grace window are
left alone, since they may belong to a marker that is still being created.
"""

import argparse
import os
import shutil
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logic import config  # noqa: E402
from logic.markers import load_markers  # noqa: E402
from logic.sessions import purge_expired_sessions  # noqa: E402

GRACE_SECONDS = 3600


def find_orphan_dirs(grace: float = GRACE_SECONDS):
    """Find upload directories that belong to no marker.

    Args:
        grace: Directories modified less than this many seconds ago are skipped.

    Returns:
        Sorted list of orphaned directory paths.
    """
    if not os.path.isdir(config.UPLOADS_DIR):
        return []

    marker_ids = {str(m.get("id")) for m in load_markers()["markers"]}

    cutoff = time.time() - grace

    orphans = []
    for entry in os.listdir(config.UPLOADS_DIR):
        path = os.path.join(config.UPLOADS_DIR, entry)
        if not os.path.isdir(path) or entry in marker_ids:
            continue
        if os.path.getmtime(path) > cutoff:
            continue
        orphans.append(path)

    return sorted(orphans)


def cleanup(dry_run: bool = False, grace: float = GRACE_SECONDS):
    """Remove orphaned upload directories and expired sessions.

    Args:
        dry_run: Only report what would be removed.
        grace: Age in seconds below which an orphaned directory is kept.

    Returns:
        Tuple of (orphaned directories, expired sessions removed).
    """
    orphans = find_orphan_dirs(grace)

    for path in orphans:
        if dry_run:
            print(f"Would remove {path}")
        else:
            shutil.rmtree(path)
            print(f"Removed {path}")

    expired = 0 if dry_run else purge_expired_sessions()

    return orphans, expired


def main(argv=None):
    parser = argparse.ArgumentParser(description="Remove orphaned uploads and expired sessions")
    parser.add_argument("--data-dir", help="Data directory (defaults to DATA_DIR)")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would be removed")
    parser.add_argument(
        "--grace",
        type=float,
        default=GRACE_SECONDS,
        help=f"Skip directories modified within this many seconds (default {GRACE_SECONDS})",
    )
    args = parser.parse_args(argv)

    if args.data_dir:
        config.set_data_dir(args.data_dir)

    orphans, expired = cleanup(dry_run=args.dry_run, grace=args.grace)

    print(f"Orphaned upload directories: {len(orphans)}")
    if not args.dry_run:
        print(f"Expired sessions removed: {expired}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
