"""
Fall 2025 schedule generator.

The wizard always matches against this fixed schedule; dates use the
Canvas-friendly -04:00 offset and an 11:59 PM due time.
"""
FALL_2025_SCHEDULE = """Fall 2025 Academic Schedule:
Week 1 (Aug 26): Syllabus Quiz - Due: 2025-08-30T23:59:00-04:00
Week 2 (Sep 2): Introduction Discussion - Due: 2025-09-06T23:59:00-04:00
Week 3 (Sep 9): Assignment 1 - Due: 2025-09-13T23:59:00-04:00
Week 4 (Sep 16): Quiz 1 - Due: 2025-09-20T23:59:00-04:00
Week 5 (Sep 23): Discussion Post 2 - Due: 2025-09-27T23:59:00-04:00
Week 6 (Sep 30): Assignment 2 - Due: 2025-10-04T23:59:00-04:00
Week 7 (Oct 7): Midterm Project - Due: 2025-10-11T23:59:00-04:00
Week 8 (Oct 14): Quiz 2 - Due: 2025-10-18T23:59:00-04:00
Week 9 (Oct 21): Research Paper Draft - Due: 2025-10-25T23:59:00-04:00
Week 10 (Oct 28): Assignment 3 - Due: 2025-11-01T23:59:00-04:00
Week 11 (Nov 4): Discussion Post 3 - Due: 2025-11-08T23:59:00-04:00
Week 12 (Nov 11): Presentation - Due: 2025-11-15T23:59:00-04:00
Week 13 (Nov 18): Final Paper - Due: 2025-11-22T23:59:00-04:00
Week 14 (Nov 25): Thanksgiving Break - No assignments
Week 15 (Dec 2): Final Project - Due: 2025-12-06T23:59:00-04:00
Finals Week: Final Exam - Due: 2025-12-13T23:59:00-04:00"""


def generate_fall_2025_schedule():
    """Return the fixed Fall 2025 due date schedule text."""
    return FALL_2025_SCHEDULE
