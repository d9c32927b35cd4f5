from typing import Iterable, List

from school_directory.models.school import School


def filter_schools(schools: Iterable[School], query: str) -> List[School]:
    """Keep schools whose name, city or address contains ``query``, ignoring case."""
    q = (query or '').lower()
    if not q:
        return list(schools)
    return [
        school for school in schools
        if q in school.name.lower() or q in school.city.lower() or q in school.address.lower()
    ]


def directory_stats(schools: Iterable[School]) -> dict:
    schools = list(schools)
    return {
        'total': len(schools),
        'cities': len({school.city for school in schools}),
        'states': len({school.state for school in schools}),
    }
