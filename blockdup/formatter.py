"""
Output formatting for duplicate detection results.
"""

import json
from typing import List

from .groups import Group


def _format_file_size(size: int) -> str:
    """Format file size in human-readable format."""
    if size < 1024:
        return f"{size} bytes"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    elif size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    else:
        return f"{size / (1024 * 1024 * 1024):.1f} GB"


def _calculate_space_savings(groups: List[Group]) -> tuple[int, int]:
    """Calculate total duplicate size and potential space savings."""
    total_duplicate_size = 0
    potential_savings = 0

    for group in groups:
        total_duplicate_size += group.size * len(group)
        potential_savings += group.size * (len(group) - 1)

    return total_duplicate_size, potential_savings


def format_plain_output(groups: List[Group]) -> None:
    """
    Print every duplicate group as bare paths, one per line.

    A blank line follows each group, which keeps the output easy to split
    in shell scripts.
    """
    for group in groups:
        for file_path in group.paths:
            print(file_path)
        print()


def format_output(groups: List[Group], quiet: bool = False) -> None:
    """
    Format and print the results with grouping and statistics.

    Args:
        groups: Confirmed duplicate groups
        quiet: Print only the groups, without the summary
    """
    if groups:
        print("\n" + "=" * 60)
        print("🔍 DUPLICATE FILES FOUND")
        print("=" * 60)

        # Largest groups first for better visibility
        sorted_groups = sorted(groups, key=lambda g: g.size, reverse=True)

        for group_num, group in enumerate(sorted_groups, 1):
            print(f"\n📁 GROUP {group_num}: {len(group)} identical files ({_format_file_size(group.size)} each)")

            for file_path in sorted(group.paths):
                print(f"   • {file_path}")

            if group.size > 0:
                savings = group.size * (len(group) - 1)
                print(f"   💾 Potential space savings: {_format_file_size(savings)}")
    else:
        print("\n✅ No duplicate files found.")

    if quiet:
        return

    print("\n" + "=" * 60)
    print("📊 SUMMARY STATISTICS")
    print("=" * 60)

    duplicate_count = sum(len(group) for group in groups)
    total_duplicate_size, potential_savings = _calculate_space_savings(groups)

    print(f"👥 Duplicate files: {duplicate_count:,}")
    print(f"🔗 Duplicate file groups: {len(groups):,}")

    if groups:
        print("\n💾 Space Analysis:")
        print(f"   File duplicates size: {_format_file_size(total_duplicate_size)}")
        print(f"   File savings potential: {_format_file_size(potential_savings)}")

        if total_duplicate_size > 0 and potential_savings > 0:
            savings_percent = (potential_savings / total_duplicate_size) * 100
            print(f"   File efficiency gain: {savings_percent:.1f}% could be saved from files")

    print("=" * 60)


def format_json_output(groups: List[Group]) -> None:
    """
    Format and print the results as JSON for scripting and programmatic access.

    Args:
        groups: Confirmed duplicate groups
    """
    json_duplicates = []
    for group in groups:
        json_duplicates.append({
            "files": [
                {
                    "path": str(file_path),
                    "size": group.size,
                    "size_formatted": _format_file_size(group.size)
                }
                for file_path in group.paths
            ],
            "count": len(group)
        })

    total_duplicate_size, potential_savings = _calculate_space_savings(groups)

    output = {
        "duplicate_files": json_duplicates,
        "statistics": {
            "duplicate_files_count": sum(len(group) for group in groups),
            "duplicate_groups_count": len(groups),
            "total_duplicate_size": total_duplicate_size,
            "potential_file_savings": potential_savings
        }
    }

    print(json.dumps(output, indent=2))
