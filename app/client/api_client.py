"""
Job Portal API Client

Python counterpart of the browser client's service layer. Every call
returns the decoded JSON body; non-2xx responses raise ApiError carrying the
server's {"message": ...}.

Usage:
    client = ApiClient("http://localhost:8000")
    client.auth.login("jane@example.com", "secret123", role="candidate")
    jobs = client.jobs.list(keyword="python", location="remote")
    client.applications.apply(jobs[0]["id"], resume_link="https://cv.example.com/jane")
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.client.session import SessionStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset (None) values so partial updates only send what changed."""
    return {key: value for key, value in data.items() if value is not None}


class ApiClient:
    """
    Thin wrapper over httpx.Client that attaches the stored bearer token.

    Args:
        base_url: Server root, e.g. http://localhost:8000
        session: Where the token is persisted (default ~/.jobportal/session.json)
        transport: Optional httpx transport (used in tests)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session: Optional[SessionStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0
    ):
        self.session = session or SessionStore()
        self.http = httpx.Client(
            base_url=base_url.rstrip("/") + "/api",
            transport=transport,
            timeout=timeout
        )

        self.auth = AuthApi(self)
        self.jobs = JobsApi(self)
        self.applications = ApplicationsApi(self)
        self.companies = CompaniesApi(self)
        self.posts = PostsApi(self)
        self.comments = CommentsApi(self)

    def request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = self.http.request(method, path, headers=headers, **kwargs)

        if response.is_error:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.debug(f"{method} {path} failed: {response.status_code} {message}")
            raise ApiError(response.status_code, message)
        return response.json()

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class _Api:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthApi(_Api):
    def register(self, name: str, email: str, password: str, role: str = "candidate",
                 company_name: Optional[str] = None, profile_pic: Optional[str] = None) -> dict:
        data = self.client.post("/auth/register", json=_clean({
            "name": name, "email": email, "password": password, "role": role,
            "companyName": company_name, "profilePic": profile_pic
        }))
        self.client.session.save(data["token"], data["user"])
        return data

    def login(self, email: str, password: str, role: Optional[str] = None) -> dict:
        data = self.client.post("/auth/login", json=_clean({"email": email, "password": password, "role": role}))
        user = {key: value for key, value in data.items() if key != "token"}
        self.client.session.save(data["token"], user)
        return data

    def logout(self) -> None:
        self.client.session.clear()

    def get_profile(self) -> dict:
        return self.client.get("/auth/profile")

    def update_profile(self, **fields) -> dict:
        """Keyword arguments use the wire names, e.g. profilePic="...", skills=[...]."""
        data = self.client.put("/auth/profile", json=_clean(fields))
        self.client.session.save(data["token"], data["user"])
        return data


class JobsApi(_Api):
    def list(self, keyword: Optional[str] = None, location: Optional[str] = None,
             type: Optional[str] = None, company: Optional[str] = None) -> List[dict]:
        params = _clean({"keyword": keyword, "location": location, "type": type, "company": company})
        return self.client.get("/jobs", params=params)

    def get(self, job_id: str) -> dict:
        return self.client.get(f"/jobs/{job_id}")

    def create(self, **job) -> dict:
        return self.client.post("/jobs", json=_clean(job))

    def update(self, job_id: str, **fields) -> dict:
        return self.client.put(f"/jobs/{job_id}", json=_clean(fields))

    def delete(self, job_id: str) -> dict:
        return self.client.delete(f"/jobs/{job_id}")

    def count(self, days: Optional[int] = None) -> int:
        params = {"days": days} if days is not None else {}
        return self.client.get("/jobs/count", params=params)["count"]


class ApplicationsApi(_Api):
    def apply(self, job_id: str, resume_link: str, cover_letter: str = "") -> dict:
        return self.client.post(
            f"/applications/{job_id}",
            json={"resumeLink": resume_link, "coverLetter": cover_letter}
        )

    def mine(self) -> List[dict]:
        return self.client.get("/applications")

    def employer_applicants(self) -> List[dict]:
        return self.client.get("/applications/employer/applicants")

    def job_applicants(self, job_id: str) -> List[dict]:
        return self.client.get(f"/applications/job/{job_id}")

    def update_status(self, application_id: str, status: str) -> dict:
        return self.client.put(f"/applications/{application_id}/status", json={"status": status})


class CompaniesApi(_Api):
    def register(self, name: str, **details) -> dict:
        return self.client.post("/companies", json=_clean(dict(details, name=name)))

    def list(self) -> List[dict]:
        return self.client.get("/companies")

    def get(self, company_id: str) -> dict:
        return self.client.get(f"/companies/{company_id}")


class PostsApi(_Api):
    def list(self) -> List[dict]:
        return self.client.get("/posts")

    def create(self, content: str, image: str = "") -> dict:
        return self.client.post("/posts", json={"content": content, "image": image})

    def like(self, post_id: str) -> List[str]:
        return self.client.put(f"/posts/like/{post_id}")

    def get(self, post_id: str) -> dict:
        return self.client.get(f"/posts/{post_id}")

    def update(self, post_id: str, content: Optional[str] = None, image: Optional[str] = None) -> dict:
        return self.client.put(f"/posts/{post_id}", json=_clean({"content": content, "image": image}))

    def delete(self, post_id: str) -> dict:
        return self.client.delete(f"/posts/{post_id}")


class CommentsApi(_Api):
    def list(self, post_id: str) -> List[dict]:
        return self.client.get(f"/comments/{post_id}")

    def add(self, post_id: str, text: str) -> dict:
        return self.client.post(f"/comments/{post_id}", json={"text": text})

    def update(self, comment_id: str, text: str) -> dict:
        return self.client.put(f"/comments/{comment_id}", json={"text": text})

    def delete(self, comment_id: str) -> dict:
        return self.client.delete(f"/comments/{comment_id}")
