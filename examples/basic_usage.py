"""
Basic usage example for courseproc.

This script demonstrates how to:
1. Configure a build with selected filters
2. Feed steps through filtering and reference collation
3. Read the finalized glossary and references
"""

from courseproc.models import ResourceFilterSpec
from courseproc.pipeline import CourseBuild, StepRecord


def main():
    steps = [
        StepRecord(
            theme="networks",
            module="basics",
            filename="node01.html",
            content=(
                "<title>What is a packet?</title>"
                '[glossary term="Packet"]A unit of data sent over a network.[/glossary] '
                '[ref id="tanenbaum" type="book" author="Tanenbaum, Andrew S." '
                'booktitle="Computer Networks" edition="5th ed." date="2011"/]'
            ),
        ),
        StepRecord(
            theme="networks",
            module="basics",
            filename="node02.html",
            content='<title>Routing</title>Each [glossary term="packet"/] is routed [ref id="tanenbaum"/].',
        ),
        StepRecord(
            theme="networks",
            module="advanced",
            filename="node01.html",
            content="<title>Congestion control</title>",
            module_filters=ResourceFilterSpec(includes=("advanced",)),
        ),
    ]

    print("Building course without filters...")
    build = CourseBuild(filters="", show_progress=False)
    result = build.run(steps)

    print(f"\n✓ {len(result.included_steps)} steps included, {len(result.excluded_steps)} excluded")
    for step in result.excluded_steps:
        print(f"  excluded: {step.theme}/{step.module}/{step.step} - {step.title}")

    print("\n" + "=" * 60)
    print("GLOSSARY")
    print("=" * 60)
    for letter, entries in result.glossary_pages.items():
        print(f"\n[{letter.upper()}]")
        for entry in entries:
            print(f"  {entry.text}")
            print(f"  {entry.backlinks}")

    print("\n" + "=" * 60)
    print("REFERENCES")
    print("=" * 60)
    for entry in result.references:
        print(f"\n  {entry.text}")
        print(f"  {entry.backlinks}")


if __name__ == "__main__":
    main()
