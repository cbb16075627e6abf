"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users         - candidate and employer accounts
2. companies     - company profiles owned by employers
3. jobs          - job postings
4. applications  - one per (job, applicant) pair
5. posts         - community feed posts
6. comments      - comments on posts

Documents store references as ObjectIds. Everything returned from this
module is serialized: "_id" becomes "id" and every ObjectId becomes a string.
"Populating" replaces a reference with a small summary of the referenced
document, like a JOIN done in application code.
"""

import re
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from app.db.mongodb import get_collection, COLLECTIONS


# Newest first; _id breaks ties between documents created in the same millisecond
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]

# Fields exposed when a reference is populated
USER_REF_FIELDS = ["name"]
AUTHOR_REF_FIELDS = ["name", "profile_pic", "role"]
COMMENT_AUTHOR_REF_FIELDS = ["name", "profile_pic"]
APPLICANT_REF_FIELDS = ["name", "email", "profile_pic", "skills"]
COMPANY_REF_FIELDS = ["name", "logo", "location"]
JOB_REF_FIELDS = ["title", "description", "salary", "location", "type", "company"]


# ============================================================
# HELPERS: ObjectId handling and JSON serialization
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id; malformed ids return None so callers treat them as not found."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would generate a fresh id
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    result = {key: _serialize_value(value) for key, value in doc.items() if key != "_id"}
    if "_id" in doc:
        result["id"] = str(doc["_id"])
    return result


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def populate(
    docs: List[dict],
    field: str,
    collection_name: str,
    fields: List[str],
    target: Optional[str] = None
) -> List[dict]:
    """
    Replace the id stored under `field` with a summary of the referenced document.

    Args:
        docs: Serialized documents (ids as strings), modified in place
        field: Key holding the reference id
        collection_name: Collection the reference points into
        fields: Fields of the referenced document to include
        target: Key to store the summary under (defaults to `field`)

    Returns:
        The same list, for chaining. Dangling references become None.
    """
    target = target or field
    ids = {to_object_id(doc.get(field)) for doc in docs if doc.get(field)}
    ids.discard(None)

    refs = {}
    if ids:
        projection = {name: 1 for name in fields}
        cursor = get_collection(collection_name).find({"_id": {"$in": list(ids)}}, projection)
        refs = {str(ref["_id"]): serialize_doc(ref) for ref in cursor}

    for doc in docs:
        ref_id = doc.pop(field, None)
        doc[target] = refs.get(ref_id) if ref_id else None
    return docs


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles user accounts.
    The password hash is only ever read by get_by_email (for login).
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        company_name: str = "",
        profile_pic: str = ""
    ) -> dict:
        """
        Insert a user. Raises DuplicateKeyError when the email is taken.

        Returns:
            Serialized user without the password hash
        """
        now = datetime.utcnow()
        doc = {
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "profile_pic": profile_pic,
            "bio": "",
            "resume": "",
            "skills": [],
            "company_name": company_name,
            "company_website": "",
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get_by_id(result.inserted_id)

    def get_by_id(self, user_id: Any) -> Optional[dict]:
        """Fetch a user (without password hash)."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid}, {"password_hash": 0})
        return serialize_doc(doc)

    def get_by_email(self, email: str) -> Optional[dict]:
        """Fetch a user including the password hash."""
        doc = self.collection.find_one({"email": email})
        return serialize_doc(doc)

    def email_taken(self, email: str, exclude_user_id: Any = None) -> bool:
        query = {"email": email}
        if exclude_user_id is not None:
            query["_id"] = {"$ne": to_object_id(exclude_user_id)}
        return self.collection.count_documents(query, limit=1) > 0

    def update(self, user_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        """Set the given fields. Raises DuplicateKeyError on an email clash."""
        fields = dict(fields, updated_at=datetime.utcnow())
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$set": fields},
            projection={"password_hash": 0},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyService:
    """Handles company profiles. Each company is owned by one employer."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["companies"])

    def create(self, user_id: Any, name: str, description: str = None,
               website: str = None, location: str = None, logo: str = None) -> dict:
        """Insert a company. Raises DuplicateKeyError when the name is taken."""
        now = datetime.utcnow()
        doc = {
            "name": name,
            "description": description,
            "website": website,
            "location": location,
            "logo": logo,
            "user_id": to_object_id(user_id),
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get(result.inserted_id)

    def find(self, company_id: Any) -> Optional[dict]:
        """Fetch a company without populating its owner."""
        oid = to_object_id(company_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get(self, company_id: Any) -> Optional[dict]:
        """Fetch a company with its owner's name."""
        company = self.find(company_id)
        if company is None:
            return None
        return self.populate([company])[0]

    def get_by_name(self, name: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"name": name}))

    def list(self) -> List[dict]:
        companies = serialize_docs(self.collection.find().sort(NEWEST_FIRST))
        return self.populate(companies)

    @staticmethod
    def populate(companies: List[dict]) -> List[dict]:
        return populate(companies, "user_id", COLLECTIONS["users"], USER_REF_FIELDS, target="user")


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job postings.
    A job always carries a free-text company_name; linking a Company
    document through `company` is optional.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])

    def create(self, created_by: Any, title: str, description: str, salary: str,
               location: str, job_type: str, company_name: str,
               company_id: Any = None) -> dict:
        now = datetime.utcnow()
        doc = {
            "title": title,
            "description": description,
            "salary": salary,
            "location": location,
            "type": job_type,
            "company_name": company_name,
            "company": to_object_id(company_id) if company_id else None,
            "created_by": to_object_id(created_by),
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get(result.inserted_id)

    def find(self, job_id: Any) -> Optional[dict]:
        """Fetch a job with raw (string) references, for ownership checks."""
        oid = to_object_id(job_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get(self, job_id: Any) -> Optional[dict]:
        """Fetch a job with company and creator populated."""
        job = self.find(job_id)
        if job is None:
            return None
        return self.populate([job])[0]

    def list(
        self,
        keyword: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        company: Optional[str] = None
    ) -> List[dict]:
        """
        List jobs, newest first.

        Args:
            keyword: Case-insensitive match against title OR description
            location: Case-insensitive substring of location
            job_type: Exact job type
            company: Company id the job is linked to
        """
        query = {}
        if keyword:
            pattern = {"$regex": re.escape(keyword), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"description": pattern}]
        if location:
            query["location"] = {"$regex": re.escape(location), "$options": "i"}
        if job_type:
            query["type"] = job_type
        if company:
            # A malformed id matches nothing rather than everything
            query["company"] = to_object_id(company) or company

        jobs = serialize_docs(self.collection.find(query).sort(NEWEST_FIRST))
        return self.populate(jobs)

    def count(self, days: Optional[int] = None) -> int:
        """Count jobs, optionally only those posted in the last `days` days."""
        query = {}
        if days is not None:
            try:
                query["created_at"] = {"$gte": datetime.utcnow() - timedelta(days=days)}
            except OverflowError:
                # Window reaches past datetime.min: every job is inside it
                pass
        return self.collection.count_documents(query)

    def ids_created_by(self, user_id: Any) -> List[ObjectId]:
        cursor = self.collection.find({"created_by": to_object_id(user_id)}, {"_id": 1})
        return [doc["_id"] for doc in cursor]

    def update(self, job_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        fields = dict(fields, updated_at=datetime.utcnow())
        self.collection.update_one({"_id": to_object_id(job_id)}, {"$set": fields})
        return self.get(job_id)

    def delete(self, job_id: Any) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(job_id)})
        return result.deleted_count > 0

    @staticmethod
    def populate(jobs: List[dict]) -> List[dict]:
        populate(jobs, "company", COLLECTIONS["companies"], COMPANY_REF_FIELDS)
        return populate(jobs, "created_by", COLLECTIONS["users"], USER_REF_FIELDS)


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationService:
    """
    Handles job applications.
    The unique (job, applicant) index rejects a second application for the
    same job with DuplicateKeyError, even when two requests race.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def create(self, job_id: Any, applicant_id: Any, resume_link: str, cover_letter: str = "") -> dict:
        now = datetime.utcnow()
        doc = {
            "job": to_object_id(job_id),
            "applicant": to_object_id(applicant_id),
            "status": "applied",
            "cover_letter": cover_letter,
            "resume_link": resume_link,
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get(result.inserted_id)

    def exists(self, job_id: Any, applicant_id: Any) -> bool:
        query = {"job": to_object_id(job_id), "applicant": to_object_id(applicant_id)}
        return self.collection.count_documents(query, limit=1) > 0

    def find(self, application_id: Any) -> Optional[dict]:
        oid = to_object_id(application_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get(self, application_id: Any) -> Optional[dict]:
        application = self.find(application_id)
        if application is None:
            return None
        return self.populate([application])[0]

    def list_for_job(self, job_id: Any) -> List[dict]:
        return self._list({"job": to_object_id(job_id)})

    def list_for_jobs(self, job_ids: List[ObjectId]) -> List[dict]:
        return self._list({"job": {"$in": job_ids}})

    def list_for_applicant(self, applicant_id: Any) -> List[dict]:
        return self._list({"applicant": to_object_id(applicant_id)})

    def update_status(self, application_id: Any, status: str) -> Optional[dict]:
        self.collection.update_one(
            {"_id": to_object_id(application_id)},
            {"$set": {"status": status, "updated_at": datetime.utcnow()}}
        )
        return self.get(application_id)

    def delete_for_job(self, job_id: Any) -> int:
        result = self.collection.delete_many({"job": to_object_id(job_id)})
        return result.deleted_count

    def _list(self, query: dict) -> List[dict]:
        applications = serialize_docs(self.collection.find(query).sort(NEWEST_FIRST))
        return self.populate(applications)

    @staticmethod
    def populate(applications: List[dict]) -> List[dict]:
        populate(applications, "job", COLLECTIONS["jobs"], JOB_REF_FIELDS)
        jobs = [a["job"] for a in applications if a["job"]]
        populate(jobs, "company", COLLECTIONS["companies"], COMPANY_REF_FIELDS)
        return populate(applications, "applicant", COLLECTIONS["users"], APPLICANT_REF_FIELDS)


# ============================================================
# POSTS COLLECTION
# ============================================================

class PostService:
    """Handles community feed posts and their likes."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["posts"])

    def create(self, author_id: Any, content: str, image: str = "") -> dict:
        now = datetime.utcnow()
        doc = {
            "content": content,
            "image": image,
            "author": to_object_id(author_id),
            "likes": [],
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get(result.inserted_id)

    def find(self, post_id: Any) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get(self, post_id: Any) -> Optional[dict]:
        post = self.find(post_id)
        if post is None:
            return None
        return self.populate([post])[0]

    def list(self) -> List[dict]:
        posts = serialize_docs(self.collection.find().sort(NEWEST_FIRST))
        return self.populate(posts)

    def toggle_like(self, post_id: Any, user_id: Any) -> Optional[List[str]]:
        """
        Like the post, or unlike it when the user already liked it.

        Returns:
            The updated list of user ids who like the post, None if missing
        """
        oid = to_object_id(post_id)
        uid = to_object_id(user_id)
        if oid is None:
            return None
        # $addToSet only adds when absent; if nothing matched, the like existed
        doc = self.collection.find_one_and_update(
            {"_id": oid, "likes": {"$ne": uid}},
            {"$addToSet": {"likes": uid}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            doc = self.collection.find_one_and_update(
                {"_id": oid},
                {"$pull": {"likes": uid}},
                return_document=ReturnDocument.AFTER
            )
        if doc is None:
            return None
        return [str(like) for like in doc.get("likes", [])]

    def update(self, post_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        fields = dict(fields, updated_at=datetime.utcnow())
        self.collection.update_one({"_id": to_object_id(post_id)}, {"$set": fields})
        return self.get(post_id)

    def delete(self, post_id: Any) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(post_id)})
        return result.deleted_count > 0

    @staticmethod
    def populate(posts: List[dict]) -> List[dict]:
        return populate(posts, "author", COLLECTIONS["users"], AUTHOR_REF_FIELDS)


# ============================================================
# COMMENTS COLLECTION
# ============================================================

class CommentService:
    """Handles comments on posts."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["comments"])

    def create(self, post_id: Any, author_id: Any, text: str) -> dict:
        now = datetime.utcnow()
        doc = {
            "text": text,
            "post": to_object_id(post_id),
            "author": to_object_id(author_id),
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        return self.get(result.inserted_id)

    def find(self, comment_id: Any) -> Optional[dict]:
        oid = to_object_id(comment_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get(self, comment_id: Any) -> Optional[dict]:
        comment = self.find(comment_id)
        if comment is None:
            return None
        return self.populate([comment])[0]

    def list_for_post(self, post_id: Any) -> List[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return []
        comments = serialize_docs(self.collection.find({"post": oid}).sort(NEWEST_FIRST))
        return self.populate(comments)

    def update(self, comment_id: Any, text: str) -> Optional[dict]:
        self.collection.update_one(
            {"_id": to_object_id(comment_id)},
            {"$set": {"text": text, "updated_at": datetime.utcnow()}}
        )
        return self.get(comment_id)

    def delete(self, comment_id: Any) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(comment_id)})
        return result.deleted_count > 0

    def delete_for_post(self, post_id: Any) -> int:
        result = self.collection.delete_many({"post": to_object_id(post_id)})
        return result.deleted_count

    @staticmethod
    def populate(comments: List[dict]) -> List[dict]:
        return populate(comments, "author", COLLECTIONS["users"], COMMENT_AUTHOR_REF_FIELDS)
