from fastapi import Request

from campusvote.service import ElectionService


def get_election_service(request: Request) -> ElectionService:
    return request.app.state.election_service
