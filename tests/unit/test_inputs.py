"""
Unit Tests for Analysis Input Assembly

Tests submission selection, ready-exam marker collection and the stored
input snapshot.
"""
from datetime import timedelta

from app.core.diagnosis import (
    AnamnesisSubmission,
    ExamMarkerRecord,
    LabExam,
    build_input_snapshot,
    collect_ready_exam_markers,
    select_latest_completed_submission,
)


def _exam(exam_id, status, created_at, *markers):
    return LabExam(id=exam_id, status=status, created_at=created_at, markers=tuple(markers))


class TestSelectLatestCompletedSubmission:

    def test_first_completed_with_answers(self):
        submissions = [
            AnamnesisSubmission("s3", "draft", {"q": "rascunho"}),
            AnamnesisSubmission("s2", "completed", {}),
            AnamnesisSubmission("s1", "completed", {"q": "fadiga"}),
            AnamnesisSubmission("s0", "completed", {"q": "antigo"}),
        ]
        assert select_latest_completed_submission(submissions).id == "s1"

    def test_none_completed(self):
        submissions = [AnamnesisSubmission("s1", "pending", {"q": "x"})]
        assert select_latest_completed_submission(submissions) is None

    def test_empty(self):
        assert select_latest_completed_submission([]) is None


class TestCollectReadyExamMarkers:

    def test_only_ready_exams_flattened(self, base_date):
        exams = [
            _exam("e3", "processing", base_date, ExamMarkerRecord("TSH", 9.0)),
            _exam("e2", "ready", base_date - timedelta(days=1),
                  ExamMarkerRecord("TSH", 2.0, unit="mIU/L"),
                  ExamMarkerRecord("Ferritin", 40.0)),
            _exam("e1", "ready", base_date - timedelta(days=9), ExamMarkerRecord("Vitamin D", 22.0)),
        ]
        markers, exam_ids = collect_ready_exam_markers(exams)

        assert exam_ids == ["e2", "e1"]
        assert [m.name for m in markers] == ["TSH", "Ferritin", "Vitamin D"]
        assert markers[0].exam_date == base_date - timedelta(days=1)
        assert markers[0].unit == "mIU/L"
        assert markers[2].exam_date == base_date - timedelta(days=9)

    def test_caps_at_ten_most_recent(self, base_date):
        exams = [
            _exam(f"e{i}", "ready", base_date - timedelta(days=i), ExamMarkerRecord("CRP", float(i)))
            for i in range(12)
        ]
        markers, exam_ids = collect_ready_exam_markers(exams)

        assert exam_ids == [f"e{i}" for i in range(10)]
        assert len(markers) == 10

    def test_custom_limit(self, base_date):
        exams = [_exam(f"e{i}", "ready", base_date) for i in range(4)]
        _, exam_ids = collect_ready_exam_markers(exams, limit=2)
        assert exam_ids == ["e0", "e1"]


class TestBuildInputSnapshot:

    def test_snapshot(self, base_date):
        submission = AnamnesisSubmission("s1", "completed", {"q": "ok"})
        snapshot = build_input_snapshot(submission, ["e1", "e2"], 5, base_date)
        assert snapshot == {
            "submission_id": "s1",
            "analyzed_exam_ids": ["e1", "e2"],
            "analyzed_markers_count": 5,
            "analyzed_at": base_date.isoformat(),
        }

    def test_without_submission(self, base_date):
        snapshot = build_input_snapshot(None, [], 0, base_date)
        assert snapshot["submission_id"] is None
        assert snapshot["analyzed_exam_ids"] == []
