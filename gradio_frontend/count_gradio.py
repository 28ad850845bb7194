from __future__ import annotations

import logging
import os
from typing import Optional

import gradio as gr
from gradio import themes

from gradio_frontend.mvc.controller import StepCountController

TEMP_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".temp")
os.makedirs(TEMP_DIR, exist_ok=True)
os.environ.setdefault("GRADIO_TEMP_DIR", TEMP_DIR)

PAGE_CSS = """
:root { --color-background-secondary: #ffffff; }
.gradio-container { background: #ffffff; }
video, canvas { background: #ffffff !important; }
#input_col { border-right: 1px solid #e5e7eb; padding-right: 12px; }
#output_col { padding-left: 12px; }
@media (max-width: 768px) {
    #input_col { border-right: none; padding-right: 0; }
    #output_col { padding-left: 0; }
}
"""


def build_ui() -> gr.Blocks:
    controller = StepCountController()
    with gr.Blocks(title="原地迈步计数演示") as demo:
        gr.Markdown(
            """
            ## 使用说明
            上传一段原地左右交替迈步（下蹲步）的视频，或启用摄像头，点击开始即可实时计数。
            每完成一次左右切换计一次，进度条显示当前步的完成程度。
            """
        )

        with gr.Row():
            with gr.Column(scale=1, elem_id="input_col"):
                eval_video = gr.Video(label="待评测视频", interactive=True, height=280)
                webcam_toggle = gr.Checkbox(label="启用摄像头", value=False)
                sample_fps = gr.Slider(5, 30, value=30, step=1, label="处理帧率(FPS)")
                with gr.Row():
                    start_btn = gr.Button("开始计数", variant="primary")
                    stop_btn = gr.Button("停止", variant="secondary")
                    clear_btn = gr.Button("清空")

            with gr.Column(scale=1, elem_id="output_col"):
                preview = gr.Image(label="实时画面", interactive=False)
                progress_text = gr.Textbox(label="计数与进度(实时)", interactive=False, lines=4, max_lines=8)

        def on_toggle_webcam(enabled: bool):
            # 启用摄像头时禁用并清空视频输入
            if enabled:
                return gr.update(interactive=False, value=None)
            return gr.update(interactive=True)

        webcam_toggle.change(fn=on_toggle_webcam, inputs=[webcam_toggle], outputs=[eval_video])

        def on_start(eval_file: Optional[str], use_webcam: bool, fps: float):
            if not use_webcam and not eval_file:
                yield "请上传待评测视频或启用摄像头后再开始。", None
                return
            for txt, frame in controller.start_evaluation(eval_file, use_webcam, float(fps)):
                yield txt, frame

        start_btn.click(
            fn=on_start,
            inputs=[eval_video, webcam_toggle, sample_fps],
            outputs=[progress_text, preview],
        )

        def on_stop():
            controller.stop()
            return "已请求停止（将在下一帧停止）"

        stop_btn.click(fn=on_stop, inputs=[], outputs=[progress_text])

        def on_clear():
            controller.stop()
            return None, False, 30, "", None

        clear_btn.click(
            fn=on_clear,
            inputs=[],
            outputs=[eval_video, webcam_toggle, sample_fps, progress_text, preview],
        )
    return demo


def launch(server_name: str | None = None, server_port: int | None = None):
    demo = build_ui()
    demo.launch(
        server_name=server_name,
        server_port=server_port,
        theme=themes.Soft(primary_hue="blue", neutral_hue="slate"),
        css=PAGE_CSS,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    launch("localhost", 10621)
