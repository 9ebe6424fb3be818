"""Web UI routes for ClipTrim."""

import json
import queue
import threading
import uuid
from pathlib import Path

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    render_template,
    request,
    send_file,
)

from cliptrim.engine import ensure_ready, trim
from cliptrim.errors import ClipTrimError
from cliptrim.logging_utils import get_logger

bp = Blueprint("web", __name__, template_folder="templates")

log = get_logger(__name__)

REQUIRED_FIELDS = ("source", "start", "end")


def _jobs() -> dict[str, dict]:
    return current_app.config["JOBS"]


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/api/ready")
def ready():
    statuses: list[str] = []
    try:
        ensure_ready(current_app.config["SETTINGS"], on_status=statuses.append)
    except ClipTrimError as e:
        return jsonify({"ready": False, "status": statuses[-1] if statuses else "", "error": str(e)})
    return jsonify({"ready": True, "status": statuses[-1] if statuses else ""})


@bp.route("/api/trim", methods=["POST"])
def start_trim():
    config = request.get_json(silent=True) or {}
    missing = [f for f in REQUIRED_FIELDS if not str(config.get(f, "")).strip()]
    if missing:
        return jsonify({"error": f"Missing fields: {', '.join(missing)}"}), 400

    job_id = uuid.uuid4().hex[:12]
    progress_queue: queue.Queue = queue.Queue()
    job = {
        "source": config["source"],
        "status": "processing",
        "error": None,
        "progress_queue": progress_queue,
    }
    _jobs()[job_id] = job

    settings = current_app.config["SETTINGS"]
    args = (config["source"], config["start"], config["end"], config.get("ratio", "Original"))

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = trim(*args, settings=settings, on_progress=on_progress)
            job["result"] = {
                "output_path": str(result.output_path),
                "message": result.message,
            }
            job["status"] = "done"
        except ClipTrimError as e:
            job["status"] = "error"
            job["error"] = str(e)
        except Exception as e:
            log.exception("Job %s crashed", job_id)
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"job_id": job_id, "status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    job = _jobs().get(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    q = job.get("progress_queue")
    if q is None:
        return jsonify({"error": "Progress stream already consumed"}), 409

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                # downloads and encodes have no deadline; keep the stream open
                yield ": keepalive\n\n"
                continue
            if msg is None:
                job.pop("progress_queue", None)
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/result")
def download_result(job_id: str):
    job = _jobs().get(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    output_path = Path(job["result"]["output_path"])
    return send_file(output_path, as_attachment=True)


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    job = _jobs().get(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    resp = {"status": job["status"], "source": job["source"]}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)
