#!/usr/bin/env python3
"""
Complete Pipeline Demo: Text → Value Tree → Analysis → Upgrade → Downgrade

Shows the full workflow:
1. Parse a legacy level text
2. Analyze it
3. Upgrade it to the modern angleData format
4. Downgrade it back to version 8
5. Print everything in the canonical .adofai layout
"""

from adofai_core.analyzer import analyze_level, format_report
from adofai_core.backends import export_as_adofai
from adofai_core.examples import build_legacy_level
from adofai_core.level_utils import downgrade_level, upgrade_level
from adofai_core.serialization import stringify
from adofai_core.string_parser import parse


def main():
    text = stringify(build_legacy_level())

    print("=" * 80)
    print("LEVEL PIPELINE DEMO: Text → Tree → Analysis → Upgrade → Downgrade")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse
    # =========================================================================
    print("\n1. PARSING...")
    level = parse(text)
    print(f"   ✓ Keys: {list(level)}")

    # =========================================================================
    # STEP 2: Analyze
    # =========================================================================
    print("\n2. ANALYZING...")
    print(format_report(analyze_level(level)))

    # =========================================================================
    # STEP 3: Upgrade
    # =========================================================================
    print("\n3. UPGRADING...")
    result = upgrade_level(level)
    if not result.success:
        print(f"   ✗ Upgrade failed: {result.message}")
        return
    upgraded = parse(result.content)
    print(export_as_adofai(upgraded, 0, True))

    # =========================================================================
    # STEP 4: Downgrade
    # =========================================================================
    print("\n4. DOWNGRADING...")
    result = downgrade_level(upgraded)
    if not result.success:
        print(f"   ✗ Downgrade failed: {result.message}")
        return
    print(export_as_adofai(parse(result.content), 0, True))

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
