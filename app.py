# app.py
import logging
import tempfile
from pathlib import Path

import streamlit as st

from cognivia.config import load_settings
from cognivia.extract_text import SUPPORTED_EXTENSIONS, extract_text_from_path
from cognivia.gemini_utils import configure_gemini
from cognivia.grader import grade_quiz
from cognivia.quiz_formatter import option_letter
from cognivia.quiz_service import QuizGenerationError, generate_quiz_from_document, generate_quiz_from_topic
from cognivia.quiz_store import QuizStore, ResultRecord, StoreError

settings = load_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Configure Gemini (reads GEMINI_API_KEY from env or .env)
configure_gemini(settings.gemini_api_key)

store = QuizStore(settings.data_dir)

st.set_page_config(page_title="Cognivia - Quizzes", layout="wide")
st.title("Cognivia — AI Quizzes")

user_id = st.sidebar.text_input("User ID", value="demo-user")

tabs = st.tabs(["Generate", "Take Quiz", "History"])


def show_generation_error(err: QuizGenerationError):
    st.error(str(err))
    if err.failure is not None:
        st.write(err.failure.as_counts())
    if err.raw_output:
        with st.expander("Raw model output"):
            st.code(err.raw_output, language=None)


##### GENERATE TAB #####
with tabs[0]:
    st.header("Generate a quiz")
    source = st.radio("Source", ["Topic", "Document"], horizontal=True)

    if source == "Topic":
        topic = st.text_input("Topic", placeholder="e.g. Photosynthesis")
        if st.button("Generate Quiz") and topic:
            with st.spinner("Generating..."):
                try:
                    record = generate_quiz_from_topic(topic, user_id, store, settings=settings)
                    st.success(f"Quiz saved: {record.topic} ({len(record.questions)} questions)")
                except QuizGenerationError as e:
                    show_generation_error(e)
                except ValueError as e:
                    st.error(str(e))
    else:
        uploaded = st.file_uploader("Upload PDF / DOCX / PPTX", type=[ext.lstrip(".") for ext in SUPPORTED_EXTENSIONS])
        if uploaded and st.button("Generate Quiz from Document"):
            with st.spinner("Extracting text and generating..."):
                with tempfile.NamedTemporaryFile(delete=False, suffix=Path(uploaded.name).suffix) as tmp:
                    tmp.write(uploaded.getvalue())
                    tmp_path = tmp.name
                try:
                    text = extract_text_from_path(tmp_path)
                    record = generate_quiz_from_document(text, user_id, store, filename=uploaded.name, settings=settings)
                    st.success(f"Quiz saved: {record.topic} ({len(record.questions)} questions)")
                except QuizGenerationError as e:
                    show_generation_error(e)
                except ValueError as e:
                    st.error(str(e))
                finally:
                    Path(tmp_path).unlink(missing_ok=True)

##### TAKE QUIZ TAB #####
with tabs[1]:
    st.header("Take a quiz")
    try:
        quizzes = store.list_quizzes(user_id)
    except StoreError as e:
        st.error(str(e))
        quizzes = []
    labels = {f"{q.topic} — {q.created_at[:16]}": q for q in quizzes}
    chosen = st.selectbox("Select quiz", list(labels)) if labels else None

    if chosen:
        quiz = labels[chosen]
        responses = []
        for i, (question, opts) in enumerate(zip(quiz.questions, quiz.options)):
            st.markdown(f"**{i+1}. {question}**")
            choices = [f"{option_letter(j)}) {opt}" for j, opt in enumerate(opts)]
            pick = st.radio("", choices, index=None, key=f"{quiz.id}_q_{i}", label_visibility="collapsed")
            responses.append(pick)

        if st.button("Submit & Grade"):
            report = grade_quiz(quiz.answers, responses)
            st.success(f"Score: {report.score}/{report.total} ({report.percentage}%)")
            for i, ok in enumerate(report.correct):
                if not ok:
                    st.write(f"Question {i+1}: correct answer was {quiz.answers[i]}")
            try:
                store.save_result(ResultRecord(
                    user_id=user_id,
                    quiz_id=quiz.id,
                    score=report.score,
                    total=report.total,
                    percentage=report.percentage,
                ))
                st.write("Result saved.")
            except StoreError as e:
                st.error(f"Result not saved: {e}")
    else:
        st.info("No quizzes yet. Generate one first.")

##### HISTORY TAB #####
with tabs[2]:
    st.header("Quizzes & Results")
    try:
        quizzes = store.list_quizzes(user_id)
        results = store.list_results(user_id)
        summary = store.performance_summary(user_id)
    except StoreError as e:
        st.error(str(e))
        quizzes, results, summary = [], [], None

    if summary and summary["total_quizzes"]:
        st.subheader("Performance")
        col1, col2 = st.columns(2)
        col1.metric("Quizzes taken", summary["total_quizzes"])
        col2.metric("Average score", f"{summary['average_score']}%")
        st.write("Top topics: " + ", ".join(f"{t['topic']} ({t['count']})" for t in summary["top_topics"]))
        st.table([
            {"topic": s["topic"], "score": s["score"], "percentage": s["percentage"], "date": s["date"][:16]}
            for s in summary["recent_scores"]
        ])

    for q in quizzes:
        status = f"taken, score {q.score}" if q.is_taken else "not taken"
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"**{q.topic}** — {len(q.questions)} questions, {status}")
        if col2.button("Delete", key=f"del_{q.id}"):
            store.delete_quiz(q.id)
            st.rerun()

    if results:
        st.subheader("Results")
        st.table([
            {"quiz": r.quiz_id, "score": f"{r.score}/{r.total}", "percentage": r.percentage, "date": r.created_at[:16]}
            for r in results
        ])
