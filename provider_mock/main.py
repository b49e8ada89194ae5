"""
Local stand-in for the analysis provider.

Answers ``generateContent`` calls with a canned, schema-valid result so the
service can be run without network access:

    uvicorn provider_mock.main:app --port 9999
    GEMINI_BASE_URL=http://localhost:9999 GEMINI_API_KEY=dev python backend/run.py
"""

import json

from fastapi import FastAPI, Header, HTTPException

app = FastAPI(title="MyJellyBean provider mock")

CANNED_RESULT = {
    "category": "scam_fraud",
    "risk_score": 85,
    "confidence": 0.9,
    "top_signals": [
        "Unverified sender claims to be family",
        "Urgent request for gift cards",
    ],
    "why_it_matters": "Gift card requests from a new number are a common impersonation scam.",
    "do_this_now": [
        "Do not buy or send gift cards",
        "Call the person on a number you already have",
        "Block and report the sender",
    ],
    "safer_reply": "I can't help with that over text. I'll call you on your usual number.",
    "report_summary": {
        "what_happened": "An unknown number claiming to be a parent asked for $200 in gift cards.",
        "why_risky": ["Impersonation of a family member", "Untraceable payment method"],
        "next_steps": ["Verify by phone", "Report the number to the carrier"],
        "evidence_checklist": ["Screenshot of the message", "Sender phone number"],
    },
    "limitations": "Automated assessment; it cannot confirm who sent the message.",
}


@app.post("/models/{model}:generateContent")
async def generate_content(model: str, payload: dict, x_goog_api_key: str | None = Header(default=None)):
    if not x_goog_api_key:
        raise HTTPException(status_code=403, detail="API key missing")
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": json.dumps(CANNED_RESULT)}]},
                "finishReason": "STOP",
            }
        ],
        "modelVersion": model,
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "provider_mock"}
