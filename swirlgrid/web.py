#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SwirlGrid - Web Version
Run: swirlgrid-web  (or python -m swirlgrid.web)
Opens the browser on http://localhost:5000
"""
from __future__ import annotations

import argparse
import logging
import math
import webbrowser
from threading import Timer

from flask import Flask, Response, jsonify, render_template_string, request

from swirlgrid.core.driver import Click, DisplayParams, FrameDriver, MeasureSurface, Tick, measure_once
from swirlgrid.core.geometry import Vector
from swirlgrid.core.grid import GridParams, RotationPolicy
from swirlgrid.utils.svg import RenderParams, frame_to_svg, line_values

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>SwirlGrid</title>
    <style>
        body {
            margin: 0;
            padding: 20px;
            background: {{ background }};
        }
        #canvas {
            display: block;
            cursor: crosshair;
        }
    </style>
</head>
<body>
    <svg id="canvas" xmlns="http://www.w3.org/2000/svg"
         viewBox="0 0 {{ canvas }} {{ canvas }}" width="{{ size }}" height="{{ size }}">
        <rect x="0" y="0" width="{{ canvas }}" height="{{ canvas }}" fill="{{ background }}"/>
        <g id="lines" stroke="{{ stroke }}" stroke-width="{{ stroke_width }}"></g>
    </svg>
    <script>
        const NS = 'http://www.w3.org/2000/svg';
        const svg = document.getElementById('canvas');
        const group = document.getElementById('lines');
        let last = null;

        async function post(url, body) {
            const res = await fetch(url, {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify(body)
            });
            return res.json();
        }

        function draw(lines) {
            while (group.childNodes.length > lines.length) {
                group.removeChild(group.lastChild);
            }
            while (group.childNodes.length < lines.length) {
                group.appendChild(document.createElementNS(NS, 'line'));
            }
            // each line is [x1, y1, x2, y2, angle, cx, cy]
            lines.forEach((v, i) => {
                const el = group.childNodes[i];
                el.setAttribute('x1', v[0]);
                el.setAttribute('y1', v[1]);
                el.setAttribute('x2', v[2]);
                el.setAttribute('y2', v[3]);
                el.setAttribute('transform', `rotate(${v[4]} ${v[5]} ${v[6]})`);
            });
        }

        // The first frame never uses the raw rAF timestamp as a delta
        async function frame(ts) {
            const delta = last === null ? 0 : ts - last;
            last = ts;
            try {
                const res = await post('/tick', {delta: delta});
                if (res.success) {
                    draw(res.lines);
                }
            } catch (e) {
                console.error('tick failed', e);
            }
            requestAnimationFrame(frame);
        }

        svg.addEventListener('click', (e) => {
            post('/click', {pageX: e.pageX, pageY: e.pageY});
        });

        // One-shot surface measurement once the SVG is laid out
        requestAnimationFrame(() => {
            try {
                const r = svg.getBoundingClientRect();
                post('/measure', {left: r.left + window.scrollX, top: r.top + window.scrollY});
            } catch (e) {
                post('/measure', {error: String(e)});
            }
        });

        requestAnimationFrame(frame);
    </script>
</body>
</html>
"""


def _finite(value) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"not a finite number: {value!r}")
    return v


def create_app(
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
    render: RenderParams | None = None,
) -> Flask:
    grid = grid or GridParams()
    render = render or RenderParams()
    display = display or DisplayParams(display_size=float(render.display_size))
    driver = FrameDriver(grid, display)

    app = Flask(__name__)
    app.config["FRAME_DRIVER"] = driver

    @app.route("/")
    def index():
        return render_template_string(
            HTML_TEMPLATE,
            canvas=f"{grid.canvas_size:g}",
            size=render.display_size,
            stroke=render.stroke,
            stroke_width=render.stroke_width,
            background=render.background,
        )

    measured = []

    @app.route("/measure", methods=["POST"])
    def measure():
        # the surface is measured once; later reports are refused
        if measured:
            return jsonify({"success": False, "error": "surface already measured"}), 409
        data = request.get_json(silent=True) or {}

        def probe() -> Vector:
            if data.get("error"):
                raise RuntimeError(data["error"])
            return Vector(_finite(data["left"]), _finite(data["top"]))

        msg = measure_once(probe)
        driver.dispatch(msg)
        if isinstance(msg, MeasureSurface):
            measured.append(msg.origin)
            return jsonify({"success": True, "origin": [msg.origin.x, msg.origin.y]})
        return jsonify({"success": False, "error": msg.reason})

    @app.route("/tick", methods=["POST"])
    def tick():
        try:
            data = request.get_json(silent=True) or {}
            delta = _finite(data["delta"])
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        pictures = driver.dispatch(Tick(delta))
        lines = [v for v in (line_values(p) for p in pictures) if v is not None]
        return jsonify({
            "success": True,
            "time": driver.model.time,
            "angle": driver.model.angle,
            "lines": lines,
        })

    @app.route("/click", methods=["POST"])
    def click():
        try:
            data = request.get_json(silent=True) or {}
            page_x = _finite(data["pageX"])
            page_y = _finite(data["pageY"])
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        driver.dispatch(Click(page_x, page_y))
        p = driver.model.perturbations[-1]
        return jsonify({
            "success": True,
            "perturbation": {"when": p.when, "at": [p.at.x, p.at.y]},
        })

    @app.route("/state")
    def state():
        m = driver.model
        return jsonify({
            "time": m.time,
            "angle": m.angle,
            "origin": [m.canvas_origin.x, m.canvas_origin.y],
            "perturbations": [{"when": p.when, "at": [p.at.x, p.at.y]} for p in m.perturbations],
        })

    @app.route("/frame.svg")
    def frame_svg():
        return Response(frame_to_svg(driver.pictures, grid, render), mimetype="image/svg+xml")

    return app


def open_browser(url: str):
    """Open browser after short delay"""
    webbrowser.open(url)


def main():
    parser = argparse.ArgumentParser(prog="swirlgrid-web", description="SwirlGrid browser viewer")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--axis-count", type=int, default=70)
    parser.add_argument("--rotation", choices=[r.value for r in RotationPolicy], default=RotationPolicy.ADDITIVE.value)
    parser.add_argument("--no-browser", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(GridParams(axis_count=args.axis_count, rotation=RotationPolicy(args.rotation)))

    url = f"http://{args.host}:{args.port}"
    logger.info("SwirlGrid serving on %s", url)
    if not args.no_browser:
        Timer(1.5, open_browser, args=(url,)).start()
    # one request at a time keeps transitions sequential
    app.run(host=args.host, port=args.port, threaded=False)


if __name__ == "__main__":
    main()
