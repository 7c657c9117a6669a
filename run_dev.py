# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn txtai_thinking.app:app --reload --host 0.0.0.0 --port 8001`
(port 8000 is left for the txtai search API the default settings point at)
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "txtai_thinking.app:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
