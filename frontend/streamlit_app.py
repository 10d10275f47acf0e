import re
import streamlit as st
import requests
import os

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")

st.set_page_config(page_title="DocuMind: Bulk Document Extraction & Intelligence", layout="wide")
st.title("📄 DocuMind")

def _get(path, **params):
    r = requests.get(f"{API_BASE}{path}", params=params)
    r.raise_for_status()
    return r

def _attachment_name(resp, default):
    match = re.search(r'filename="([^"]+)"', resp.headers.get("content-disposition", ""))
    return match.group(1) if match else default

with st.sidebar:
    st.header("Upload Documents")
    files = st.file_uploader(
        "PDF / DOCX / HTML / TXT / images",
        type=["pdf", "docx", "html", "htm", "txt", "png", "jpg", "jpeg"],
        accept_multiple_files=True,
    )
    if st.button("Extract", type="primary") and files:
        with st.spinner(f"Extracting {len(files)} document(s)..."):
            resp = requests.post(
                f"{API_BASE}/ingest",
                files=[("files", (f.name, f.getvalue(), f.type)) for f in files],
            )
        if resp.ok:
            data = resp.json()
            st.success(f"Extracted {data['succeeded']} of {data['total']} document(s).")
            for failure in data.get("failed", []):
                st.warning(f"{failure['file_name']}: {failure['reason']}")
        else:
            st.error(resp.text)

    search = st.text_input("Search documents")
    docs = _get("/documents", search=search or None).json()
    st.subheader(f"Your Documents ({len(docs)})")
    if docs:
        export = _get("/documents/export")
        st.download_button(
            "Export All (.txt)",
            data=export.text,
            file_name=_attachment_name(export, "documind_export.txt"),
        )
    for doc in docs:
        with st.expander(doc["file_name"]):
            st.caption(f"From {doc['sender'] or 'unknown'} to {doc['recipient'] or 'unknown'} · {doc['date'] or 'undated'}")
            st.write(doc["summary"])
            if doc["topics"]:
                st.write(" · ".join(doc["topics"]))
            col_dl, col_rm = st.columns(2)
            one = _get(f"/documents/{doc['id']}/export")
            col_dl.download_button(
                "Download",
                data=one.text,
                file_name=_attachment_name(one, f"{os.path.splitext(doc['file_name'])[0]}_extracted.txt"),
                key=f"dl-{doc['id']}",
            )
            if col_rm.button("Delete", key=f"rm-{doc['id']}"):
                requests.delete(f"{API_BASE}/documents/{doc['id']}")
                st.rerun()

# Chat
st.subheader("🔎 Interrogate Documents")
for turn in _get("/qa/history").json():
    with st.chat_message(turn["role"]):
        st.write(turn["text"])

q = st.chat_input("Ask about your documents, e.g. What did Jane say about the budget?")
if q:
    with st.spinner("Thinking..."):
        r = requests.post(f"{API_BASE}/qa", json={"question": q})
    if r.ok:
        st.rerun()
    else:
        st.error(r.text)
