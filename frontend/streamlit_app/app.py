import json, os, requests, streamlit as st

API = os.getenv("API_URL", "http://localhost:8000/api/v1")

st.set_page_config(page_title="DocuTasks UI", layout="centered")
st.title("DocuTasks — Turn documents into tasks")

def run_analysis(files=None, data=None):
    bar = st.progress(0, text="Starting...")
    with requests.post(f"{API}/documents/analyze", files=files, data=data, stream=True, timeout=600) as r:
        if r.status_code != 200:
            st.error(r.json().get("detail", r.text))
            return None
        for line in r.iter_lines(decode_unicode=True):
            if not line or not line.startswith("data: "):
                continue
            event = json.loads(line[len("data: "):])
            if event["type"] == "progress":
                bar.progress(event["progress"], text=event["message"])
            elif event["type"] == "complete":
                return event["result"]
            else:
                st.error(event["error"])
    return None

with st.form("analyze"):
    upload = st.file_uploader("Upload a PDF, DOCX or TXT", type=["pdf", "docx", "txt"])
    text = st.text_area("...or paste a system description:")
    if st.form_submit_button("Analyze"):
        if upload is not None:
            result = run_analysis(files={"document": (upload.name, upload.getvalue(), upload.type)})
        else:
            result = run_analysis(data={"text": text})
        if result:
            st.session_state["result"] = result

result = st.session_state.get("result")
if result:
    st.subheader(result["summary"])
    st.dataframe(
        [{"ID": t["id"], "Title": t["title"], "Description": t["description"]} for t in result["tasks"]],
        use_container_width=True,
    )
    sheet = st.text_input("Sheet name", value="Tasks")
    r = requests.post(f"{API}/documents/export", json={"tasks": result["tasks"], "sheet_name": sheet})
    if r.ok:
        st.download_button("Export to Excel", r.content, file_name="tasks.xlsx",
                           mime=r.headers.get("content-type"))
    else:
        st.error(f"Export failed: {r.text}")
