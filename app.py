import gradio as gr

from json_entity_extractor.handlers import infer_schema_handler, show_entity_handler

# --- UI Definition ---
with gr.Blocks(title="JSON Entity Extractor") as demo:
    gr.Markdown("# JSON Entity Extractor")
    gr.Markdown(
        "Upload JSON files holding example records. Nested objects and arrays of objects "
        "become related entities; download one schema per entity plus the association manifest."
    )

    # State
    entities_state = gr.State()

    with gr.Row():
        # Left Panel: Input
        with gr.Column(scale=1):
            gr.Markdown("### 1. Import")
            file_input = gr.File(label="Upload JSON Files", file_types=[".json"], file_count="multiple")
            model_name = gr.Textbox(
                label="Main Entity Name",
                placeholder="Defaults to the first file name",
                info="Further files are named after their file name.",
            )
            infer_btn = gr.Button("Infer Schema", variant="primary")
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Download")
            download_output = gr.File(label="Schema Files", file_count="multiple")

        # Right Panel: Results
        with gr.Column(scale=1):
            gr.Markdown("### 3. Entities")
            entity_selector = gr.Dropdown(label="Entity", choices=[], interactive=True)
            entity_view = gr.JSON(label="Fields")

            gr.Markdown("### 4. Associations")
            manifest_view = gr.JSON(label="Manifest")

            preview_view = gr.JSON(label="Main Entity Preview (first 3 rows)")

    infer_btn.click(
        fn=infer_schema_handler,
        inputs=[file_input, model_name],
        outputs=[entities_state, manifest_view, preview_view, download_output, entity_selector, status_msg],
    )

    entity_selector.change(
        fn=show_entity_handler,
        inputs=[entities_state, entity_selector],
        outputs=[entity_view],
    )

if __name__ == "__main__":
    demo.launch()
