from flask import Blueprint, jsonify, request

from portal.routes.common import current_session, json_body, optional_version, services, to_json, upload_from_request


bp = Blueprint("papers", __name__, url_prefix="/api/papers")


@bp.post("")
def submit():
    """
    multipart/form-data: title, abstract, keywords (comma separated), file.
    """
    paper = services().submissions.submit(
        current_session(),
        title=request.form.get("title"),
        abstract=request.form.get("abstract"),
        keywords=request.form.get("keywords"),
        file=upload_from_request("file"),
    )
    return jsonify(to_json(paper)), 201


@bp.get("/mine")
def mine():
    papers = services().submissions.list_for_owner(current_session())
    return jsonify({"count": len(papers), "papers": to_json(papers)}), 200


@bp.get("")
def list_all():
    papers = services().submissions.list_all(current_session())
    return jsonify({"count": len(papers), "papers": to_json(papers)}), 200


@bp.get("/<paper_id>")
def get_one(paper_id: str):
    return jsonify(to_json(services().submissions.get(current_session(), paper_id))), 200


@bp.post("/<paper_id>/review")
def review(paper_id: str):
    """
    JSON: { status: string, comment?: string, version?: int }
    """
    body = json_body()
    paper = services().submissions.review(
        current_session(),
        paper_id,
        body.get("status"),
        body.get("comment"),
        expected_version=optional_version(body),
    )
    return jsonify(to_json(paper)), 200
