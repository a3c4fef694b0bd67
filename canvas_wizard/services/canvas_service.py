"""
Canvas LMS due date updates.

Each match is resolved to a Canvas assignment id by name and then updated with
a PUT that only sets due_at. Failures are collected per assignment; the run
never stops early.
"""
import logging

import requests

from canvas_wizard.config import config, CANVAS_PER_PAGE

logger = logging.getLogger(__name__)


def _headers(token):
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


def _next_link(link_header):
    """Return the rel="next" URL from a Canvas Link header, if any."""
    if not link_header:
        return None
    for part in link_header.split(','):
        if 'rel="next"' in part:
            return part[part.find('<') + 1:part.find('>')]
    return None


def names_match(wanted, canvas_name):
    """Case-insensitive substring test in either direction."""
    a = ('' if wanted is None else str(wanted)).strip().lower()
    b = ('' if canvas_name is None else str(canvas_name)).strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def find_assignment_id(assignment_name, assignments):
    """
    Resolve a match name to a Canvas assignment id.

    The first assignment (in Canvas list order) whose name satisfies
    names_match wins; there is no further tie-break when several do.
    Entries that are not objects are skipped.
    """
    for assignment in assignments:
        if not isinstance(assignment, dict):
            continue
        if names_match(assignment_name, assignment.get('name')):
            return assignment.get('id')
    return None


class CanvasFetchError(Exception):
    """GET of the course assignment list did not return 200."""

    def __init__(self, status_code):
        super().__init__(f"Failed to fetch assignments: HTTP {status_code}")
        self.status_code = status_code


class CanvasClient:
    """Minimal Canvas REST client for course assignments."""

    def __init__(self, base_url, token, course_id, http=None, timeout=None):
        self.base_url = (base_url or '').rstrip('/')
        self.token = token
        self.course_id = str(course_id).strip()
        self.http = http or requests.Session()
        self.timeout = config.canvas_timeout if timeout is None else timeout

    @property
    def assignments_url(self):
        return f"{self.base_url}/courses/{self.course_id}/assignments"

    def list_assignments(self):
        """Fetch every assignment in the course, following pagination."""
        assignments = []
        url = self.assignments_url
        params = {"per_page": CANVAS_PER_PAGE}
        while url:
            response = self.http.get(url, headers=_headers(self.token), params=params, timeout=self.timeout)
            if response.status_code != 200:
                raise CanvasFetchError(response.status_code)
            page = response.json()
            if not isinstance(page, list):
                raise ValueError("unexpected assignments payload from Canvas")
            assignments.extend(page)
            url = _next_link(response.headers.get('Link', ''))
            # the next link already carries the query string
            params = None
        return assignments

    def update_due_date(self, assignment_id, due_at):
        """PUT the new due date; returns the HTTP status code."""
        url = f"{self.assignments_url}/{assignment_id}"
        response = self.http.put(
            url,
            headers=_headers(self.token),
            json={"assignment": {"due_at": due_at}},
            timeout=self.timeout,
        )
        return response.status_code


def update_canvas_assignments(base_url, token, course_id, matches, http=None):
    """
    Push each match's due date to Canvas.

    Returns (updated_count, errors). Without an http session, one is opened
    for the run and closed when it ends.
    """
    if http is None:
        with requests.Session() as session:
            return update_canvas_assignments(base_url, token, course_id, matches, http=session)

    client = CanvasClient(base_url, token, course_id, http=http)
    updated_count = 0
    errors = []

    for match in matches:
        assignment_name = match.get('assignment_name', '')
        new_due_date = match.get('matched_due_date', '')
        try:
            assignments = client.list_assignments()
            assignment_id = find_assignment_id(assignment_name, assignments)
            if assignment_id is None:
                errors.append(f"Assignment not found: {assignment_name}")
                continue

            status = client.update_due_date(assignment_id, new_due_date)
            if status == 200:
                updated_count += 1
                logger.info("Updated Canvas assignment %s (%s) -> %s", assignment_id, assignment_name, new_due_date)
            else:
                errors.append(f"Failed to update {assignment_name}: HTTP {status}")
        except CanvasFetchError as e:
            errors.append(str(e))
        except (requests.RequestException, ValueError) as e:
            errors.append(f"Error updating {assignment_name}: {e}")

    if errors:
        logger.warning("Canvas update finished with %d error(s) for course %s", len(errors), client.course_id)
    return updated_count, errors
