"""
GUI for Product Image Updater.

Tkinter/ttkbootstrap interface: password page, collection search, product
selection grid and the image update operation panel.

All network calls run on worker threads. Their results come back through a
queue that the Tk main loop drains every 50ms, so widgets are only touched
from the main thread.
"""

import os
import queue
import logging
import threading
import webbrowser
from tkinter import filedialog, messagebox
import ttkbootstrap as tb
from ttkbootstrap.tooltip import ToolTip

from . import server_api
from .auth import PasswordGate, IncorrectPasswordError
from .config import (
    load_config, save_config, resolve_runtime_config, log_and_status, SCRIPT_VERSION, APP_TITLE
)
from .csv_template import read_image_update_csv, summarize_rows
from .host_context import select_host_context
from .operation import ImageUpdateWorkflow
from .request_guard import LatestRequestTracker
from .selection import SelectionModel
from .utils import format_timestamp, is_csv_file, pluralize

STATUS_STYLES = {
    "pending": "info",
    "processing": "warning",
    "completed": "success",
    "failed": "danger",
}


def main_image_name(product):
    """File name of the product's main image, or an empty string."""
    image = product.main_image
    if image is None:
        return ""
    return os.path.basename(image.src.split("?", 1)[0])


HELP_TEXT = """How to Use Image Update Operations

1. Select a Collection: search for and choose the collection containing the products you want to update.
2. Select Products: use "Select All" or click products in the list to select them individually.
3. Create Operation: click "Create Operation" to generate a CSV template.
4. Download CSV: get the template with current image information and IDs.
5. Update URLs: edit the "New Image URL" column in the CSV file with your new image URLs.
6. Upload & Process: upload the updated CSV and process the image changes.

Important Notes:
• The CSV includes current image IDs to handle variant-image relationships
• New image URLs must be publicly accessible
• Images are processed in order (first image becomes the main product image)
• Operation history tracks all changes with rollback capability
• Rate limiting is applied to respect Shopify API limits
"""


def show_password_page(app, gate, on_success):
    """Render the password form into the main window."""
    frame = tb.Frame(app, padding=40)
    frame.place(relx=0.5, rely=0.4, anchor="center")

    tb.Label(frame, text=APP_TITLE, font=("Arial", 16, "bold")).pack(pady=(0, 5))
    tb.Label(frame, text="Enter password to access the application", bootstyle="secondary").pack(pady=(0, 15))

    password_var = tb.StringVar()
    entry = tb.Entry(frame, textvariable=password_var, show="*", width=35)
    entry.pack(pady=5)
    entry.focus_set()

    error_label = tb.Label(frame, text="", bootstyle="danger")
    error_label.pack(pady=5)

    def submit(*_):
        try:
            gate.authenticate(password_var.get())
        except IncorrectPasswordError as e:
            error_label.config(text=str(e))
            password_var.set("")
            return
        frame.destroy()
        on_success()

    enter_btn = tb.Button(frame, text="Enter Application", command=submit, bootstyle="primary", state="disabled")
    enter_btn.pack(pady=10, fill="x")

    password_var.trace_add(
        "write", lambda *_: enter_btn.config(state="normal" if password_var.get().strip() else "disabled")
    )
    entry.bind("<Return>", submit)


def show_help_dialog(parent):
    dialog = tb.Toplevel(parent)
    dialog.title("Image Update Help")
    dialog.geometry("620x460")
    dialog.transient(parent)

    text = tb.Text(dialog, wrap="word", height=20)
    text.insert("1.0", HELP_TEXT)
    text.config(state="disabled")
    text.pack(fill="both", expand=True, padx=10, pady=10)

    tb.Button(dialog, text="Got it", command=dialog.destroy, bootstyle="primary").pack(pady=(0, 10))


def open_history_dialog(parent, cfg, run_in_background, status):
    """Show past operations with rollback and repeat actions."""
    dialog = tb.Toplevel(parent)
    dialog.title("Operation History")
    dialog.geometry("900x420")
    dialog.transient(parent)

    columns = ("created", "collection", "status", "products", "images")
    tree = tb.Treeview(dialog, columns=columns, show="headings", height=12)
    for column, heading, width in [
        ("created", "Created", 160), ("collection", "Collection", 260),
        ("status", "Status", 100), ("products", "Products", 80), ("images", "Images Updated", 110),
    ]:
        tree.heading(column, text=heading)
        tree.column(column, width=width, anchor="w")
    tree.pack(fill="both", expand=True, padx=10, pady=10)

    button_frame = tb.Frame(dialog)
    button_frame.pack(fill="x", padx=10, pady=(0, 10))

    def populate(operations):
        tree.delete(*tree.get_children())
        for operation in operations:
            tree.insert("", "end", iid=operation.operation_id, values=(
                format_timestamp(operation.timestamp),
                operation.collection_name,
                operation.status.upper(),
                operation.products_count,
                operation.images_updated,
            ))

    def refresh():
        run_in_background(
            lambda: server_api.get_operation_history(cfg),
            populate,
            lambda e: status(f"❌ Failed to load operation history: {e}")
        )

    def run_action(label, action):
        selected = tree.selection()
        if not selected:
            messagebox.showinfo("Operation History", "Select an operation first.", parent=dialog)
            return
        operation_id = selected[0]
        if not messagebox.askyesno(label, f"{label} operation {operation_id}?", parent=dialog):
            return

        def done(result):
            status(f"{'✅' if result.get('success', True) else '❌'} {result.get('message') or label + ' requested'}")
            refresh()

        run_in_background(
            lambda: action(operation_id, cfg),
            done,
            lambda e: status(f"❌ {label} failed: {e}")
        )

    tb.Button(button_frame, text="Refresh", command=refresh, bootstyle="secondary-outline").pack(side="left", padx=5)
    tb.Button(
        button_frame, text="Rollback", bootstyle="danger-outline",
        command=lambda: run_action("Rollback", server_api.rollback_operation)
    ).pack(side="left", padx=5)
    tb.Button(
        button_frame, text="Repeat", bootstyle="info-outline",
        command=lambda: run_action("Repeat", server_api.repeat_operation)
    ).pack(side="left", padx=5)
    tb.Button(button_frame, text="Close", command=dialog.destroy, bootstyle="secondary").pack(side="right", padx=5)

    refresh()


def build_gui(shop=None, host=None):
    """Build the main GUI application."""
    file_cfg = load_config()
    cfg = resolve_runtime_config(file_cfg)
    host_context = select_host_context(cfg, shop=shop, host=host)
    gate = PasswordGate(cfg["APP_PASSWORD"])

    app = tb.Window(themename="flatly")
    app.title(APP_TITLE)
    app.geometry(cfg.get("WINDOW_GEOMETRY", "1100x850"))

    # Queue of callables to run on the Tk main thread
    ui_queue = queue.Queue()

    def process_ui_queue():
        """Run pending main-thread callbacks. Runs in main thread."""
        while True:
            try:
                callback = ui_queue.get_nowait()
            except queue.Empty:
                break
            try:
                callback()
            except Exception as e:
                logging.error(f"UI callback failed: {e}", exc_info=True)
        app.after(50, process_ui_queue)

    def run_in_background(work, on_success, on_error):
        """Run work() on a worker thread and hand its outcome to the main thread."""
        def runner():
            try:
                result = work()
            except Exception as e:
                logging.error(f"Background task failed: {e}", exc_info=True)
                ui_queue.put(lambda error=e: on_error(error))
                return
            ui_queue.put(lambda: on_success(result))

        threading.Thread(target=runner, daemon=True).start()

    def on_closing():
        """Handle window close event."""
        try:
            file_cfg["WINDOW_GEOMETRY"] = app.geometry()
            save_config(file_cfg)
        except Exception as e:
            logging.warning(f"Failed to save window geometry: {e}")
        app.quit()

    app.protocol("WM_DELETE_WINDOW", on_closing)
    app.after(50, process_ui_queue)

    def start_main_view():
        build_main_view(app, cfg, file_cfg, host_context, gate, run_in_background, ui_queue, on_closing)

    show_password_page(app, gate, start_main_view)
    app.mainloop()


def build_main_view(app, cfg, file_cfg, host_context, gate, run_in_background, ui_queue, on_closing):
    """Collection search, product grid and operation panel."""
    root_frame = tb.Frame(app)
    root_frame.pack(fill="both", expand=True)

    selection = SelectionModel()
    tracker = LatestRequestTracker()
    view = {"collection": None, "search_query": "", "search_cursor": None, "products_cursor": None, "busy": False}

    # ------------------------------------------------------------------
    # Status log
    # ------------------------------------------------------------------

    status_log = tb.Text(root_frame, height=8, state="disabled")

    def status(msg):
        """Append to the status log. Safe from any thread."""
        def append():
            status_log.config(state="normal")
            status_log.insert("end", msg + "\n")
            status_log.see("end")
            status_log.config(state="disabled")
        ui_queue.put(append)

    def on_operation_complete(operation):
        # Called on a worker thread by the workflow
        ui_queue.put(lambda: reload_products_after(operation))

    workflow = ImageUpdateWorkflow(cfg, status_fn=status, on_complete=on_operation_complete)

    # ------------------------------------------------------------------
    # Toolbar
    # ------------------------------------------------------------------

    toolbar = tb.Frame(root_frame)
    toolbar.pack(side="top", fill="x", padx=5, pady=5)

    tb.Label(toolbar, text=APP_TITLE, font=("Arial", 14, "bold")).pack(side="left", padx=10)
    if host_context.shop:
        tb.Label(toolbar, text=f"({host_context.shop})", bootstyle="secondary").pack(side="left")

    def logout():
        if workflow.is_active and not messagebox.askyesno(
            "Log out", "An operation is still in progress. Log out anyway?"
        ):
            return
        gate.logout()
        root_frame.destroy()
        show_password_page(
            app, gate,
            lambda: build_main_view(app, cfg, file_cfg, host_context, gate, run_in_background, ui_queue, on_closing)
        )

    tb.Button(toolbar, text="Exit", command=on_closing, bootstyle="secondary").pack(side="right", padx=5)
    tb.Button(toolbar, text="Log out", command=logout, bootstyle="secondary-outline").pack(side="right", padx=5)
    tb.Button(
        toolbar, text="History",
        command=lambda: open_history_dialog(app, cfg, run_in_background, status),
        bootstyle="info-outline"
    ).pack(side="right", padx=5)
    tb.Button(toolbar, text="ⓘ Help", command=lambda: show_help_dialog(app), bootstyle="info-outline").pack(
        side="right", padx=5
    )

    # ------------------------------------------------------------------
    # Collection search
    # ------------------------------------------------------------------

    search_frame = tb.Labelframe(root_frame, text="Search Collections", padding=10)
    search_frame.pack(fill="x", padx=10, pady=5)

    query_var = tb.StringVar()
    query_entry = tb.Entry(search_frame, textvariable=query_var, width=50)
    query_entry.grid(row=0, column=0, sticky="ew", padx=5)
    ToolTip(query_entry, text="Enter a collection name or handle to search for", bootstyle="info")
    search_frame.columnconfigure(0, weight=1)

    search_btn = tb.Button(search_frame, text="Search", bootstyle="primary", state="disabled")
    search_btn.grid(row=0, column=1, padx=5)
    more_btn = tb.Button(search_frame, text="More results", bootstyle="secondary-outline", state="disabled")
    more_btn.grid(row=0, column=2, padx=5)

    search_message = tb.Label(search_frame, text="", bootstyle="secondary")
    search_message.grid(row=1, column=0, columnspan=3, sticky="w", padx=5, pady=(5, 0))

    collection_tree = tb.Treeview(
        search_frame, columns=("title", "products", "handle"), show="headings", height=5
    )
    for column, heading, width in [("title", "Collection", 320), ("products", "Products", 90), ("handle", "Handle", 260)]:
        collection_tree.heading(column, text=heading)
        collection_tree.column(column, width=width, anchor="w")
    collection_tree.grid(row=2, column=0, columnspan=3, sticky="ew", padx=5, pady=5)

    collections_by_id = {}

    def show_collections(page, append):
        if not append:
            collection_tree.delete(*collection_tree.get_children())
            collections_by_id.clear()
        for collection in page.items:
            if collection.id in collections_by_id:
                continue
            collections_by_id[collection.id] = collection
            collection_tree.insert("", "end", iid=collection.id, values=(
                collection.title, collection.products_count, collection.handle
            ))
        view["search_cursor"] = page.end_cursor if page.has_next_page else None
        more_btn.config(state="normal" if view["search_cursor"] else "disabled")

        total = len(collections_by_id)
        if total:
            search_message.config(text=f"Found {pluralize(total, 'collection')}", bootstyle="secondary")
        else:
            search_message.config(text=f'No collections found matching "{view["search_query"]}"', bootstyle="secondary")

    def run_search(append=False):
        if not append:
            view["search_query"] = query_var.get().strip()
            view["search_cursor"] = None
        query = view["search_query"]
        if not query:
            return
        cursor = view["search_cursor"] if append else None
        token = tracker.begin("search")
        search_btn.config(state="disabled")
        search_message.config(text="Searching collections...", bootstyle="secondary")

        def on_success(page):
            if not tracker.is_current("search", token):
                logging.debug(f"Discarding stale search result for '{query}'")
                return
            search_btn.config(state="normal")
            show_collections(page, append)

        def on_error(e):
            if not tracker.is_current("search", token):
                return
            search_btn.config(state="normal")
            search_message.config(text=str(e), bootstyle="danger")
            log_and_status(status, f"Collection search failed: {e}", level="error", ui_msg=f"❌ {e}")

        run_in_background(
            lambda: server_api.search_collections(query, cfg, limit=cfg["COLLECTIONS_PAGE_SIZE"], after=cursor),
            on_success, on_error
        )

    search_btn.config(command=run_search)
    more_btn.config(command=lambda: run_search(append=True))
    query_entry.bind("<Return>", lambda _: run_search())
    query_var.trace_add(
        "write", lambda *_: search_btn.config(state="normal" if query_var.get().strip() else "disabled")
    )

    # ------------------------------------------------------------------
    # Operation panel
    # ------------------------------------------------------------------

    op_frame = tb.Labelframe(root_frame, text="Image Update Operations", padding=10)
    op_frame.pack(fill="x", padx=10, pady=5)

    op_status_label = tb.Label(op_frame, text="No operation", font=("Arial", 10, "bold"), bootstyle="secondary")
    op_status_label.grid(row=0, column=0, columnspan=6, sticky="w", padx=5)
    op_detail_label = tb.Label(op_frame, text="Select products to create an image update operation.")
    op_detail_label.grid(row=1, column=0, columnspan=6, sticky="w", padx=5, pady=(0, 8))

    create_btn = tb.Button(op_frame, text="Create Operation", bootstyle="success")
    download_btn = tb.Button(op_frame, text="Download CSV Template", bootstyle="info")
    upload_btn = tb.Button(op_frame, text="Upload Updated CSV", bootstyle="info")
    process_btn = tb.Button(op_frame, text="Process Image Updates", bootstyle="success")
    refresh_btn = tb.Button(op_frame, text="Refresh Status", bootstyle="secondary-outline")
    new_btn = tb.Button(op_frame, text="New Operation", bootstyle="secondary-outline")
    for column, button in enumerate([create_btn, download_btn, upload_btn, process_btn, refresh_btn, new_btn]):
        button.grid(row=2, column=column, padx=5, sticky="w")

    def update_operation_panel():
        """Enable only the actions valid in the current lifecycle state."""
        operation = workflow.operation
        busy = view["busy"]

        def enable(button, allowed):
            button.config(state="normal" if allowed and not busy else "disabled")

        enable(create_btn, view["collection"] is not None and workflow.can_create(selection.count))
        enable(download_btn, workflow.can_download())
        enable(upload_btn, workflow.can_upload())
        enable(process_btn, workflow.can_process())
        enable(refresh_btn, workflow.can_refresh())
        enable(new_btn, workflow.can_start_new())

        if operation is None:
            op_status_label.config(text="No operation", bootstyle="secondary")
            if selection.count:
                op_detail_label.config(
                    text=f"Next: create an image update operation for {pluralize(selection.count, 'selected product')}."
                )
            else:
                op_detail_label.config(text="Select products to create an image update operation.")
            return

        op_status_label.config(
            text=f"Status: {operation.status.upper()}", bootstyle=STATUS_STYLES.get(operation.status, "secondary")
        )
        detail = (f"Products: {operation.products_count}   "
                  f"Created: {format_timestamp(operation.timestamp)}   "
                  f"Images Updated: {operation.images_updated}")
        if workflow.uploaded_file:
            detail += f"   CSV: {os.path.basename(workflow.uploaded_file)}"
        if operation.error_message:
            detail += f"\nError: {operation.error_message}"
        op_detail_label.config(text=detail)

    def run_operation_action(label, work, on_success=None):
        view["busy"] = True
        update_operation_panel()

        def success(result):
            view["busy"] = False
            if on_success is not None:
                on_success(result)
            update_operation_panel()

        def error(e):
            view["busy"] = False
            log_and_status(status, f"{label} failed: {e}", level="error", ui_msg=f"❌ {label} failed: {e}")
            update_operation_panel()

        run_in_background(work, success, error)

    def create_operation():
        collection = view["collection"]
        product_ids = selection.selected_ids
        if collection is None or not product_ids:
            return
        status(f"Creating image update operation for {pluralize(len(product_ids), 'product')}...")
        run_operation_action("Create operation", lambda: workflow.create(collection.id, product_ids))

    def download_csv():
        dest_dir = filedialog.askdirectory(
            title="Save CSV Template To", initialdir=cfg.get("DOWNLOAD_DIR") or os.getcwd()
        )
        if not dest_dir:
            return
        file_cfg["DOWNLOAD_DIR"] = dest_dir
        save_config(file_cfg)

        def downloaded(path):
            try:
                summary = summarize_rows(read_image_update_csv(path))
                status(f"Template has {pluralize(summary['rows'], 'row')} for "
                       f"{pluralize(summary['products'], 'product')}. Fill in the 'New Image URL' column.")
            except (OSError, UnicodeDecodeError) as e:
                logging.warning(f"Could not preview downloaded CSV: {e}")

        run_operation_action("Download CSV", lambda: workflow.download_csv(dest_dir), downloaded)

    def upload_csv():
        path = filedialog.askopenfilename(
            title="Select CSV File",
            initialdir=cfg.get("DOWNLOAD_DIR") or os.getcwd(),
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")]
        )
        if not path:
            return
        if not is_csv_file(path):
            log_and_status(status, f"Rejected non-CSV upload {path}", level="warning",
                           ui_msg="❌ Please select a valid CSV file.")
            messagebox.showerror("Upload CSV", "Please select a valid CSV file.")
            return

        try:
            summary = summarize_rows(read_image_update_csv(path))
            status(f"Uploading {os.path.basename(path)}: {pluralize(summary['new_urls'], 'new image URL')}"
                   f" in {pluralize(summary['rows'], 'row')}")
            if summary["invalid_urls"]:
                status(f"⚠️ {pluralize(summary['invalid_urls'], 'URL')} do not look like http(s) links")
        except (OSError, UnicodeDecodeError) as e:
            logging.warning(f"Could not preview CSV before upload: {e}")

        run_operation_action("Upload CSV", lambda: workflow.upload_csv(path))

    def process_updates():
        status("Processing image updates...")
        run_operation_action("Process image updates", workflow.process)

    def refresh_operation():
        run_operation_action("Refresh status", workflow.refresh)

    def start_new_operation():
        workflow.start_new()
        status("Ready for a new operation.")
        update_operation_panel()

    create_btn.config(command=create_operation)
    download_btn.config(command=download_csv)
    upload_btn.config(command=upload_csv)
    process_btn.config(command=process_updates)
    refresh_btn.config(command=refresh_operation)
    new_btn.config(command=start_new_operation)

    # ------------------------------------------------------------------
    # Product grid
    # ------------------------------------------------------------------

    product_frame = tb.Labelframe(root_frame, text="Products", padding=10)
    product_frame.pack(fill="both", expand=True, padx=10, pady=5)

    product_buttons = tb.Frame(product_frame)
    product_buttons.pack(fill="x")
    selection_label = tb.Label(product_buttons, text="")
    selection_label.pack(side="left", padx=5)

    product_tree = tb.Treeview(
        product_frame,
        columns=("selected", "title", "status", "main_image", "images", "variants", "vendor", "type"),
        show="headings", height=12
    )
    for column, heading, width in [
        ("selected", "✓", 40), ("title", "Product", 280), ("status", "Status", 80),
        ("main_image", "Main Image", 160), ("images", "Images", 70),
        ("variants", "Variants", 70), ("vendor", "Vendor", 150), ("type", "Type", 150),
    ]:
        product_tree.heading(column, text=heading)
        product_tree.column(column, width=width, anchor="w")
    product_tree.pack(fill="both", expand=True, pady=5)

    product_message = tb.Label(product_frame, text="", bootstyle="secondary")
    product_message.pack(fill="x")
    more_products_btn = tb.Button(product_frame, text="More products", bootstyle="secondary-outline", state="disabled")
    more_products_btn.pack(anchor="w", pady=(5, 0))

    def render_products():
        product_tree.delete(*product_tree.get_children())
        for product in selection.products:
            product_tree.insert("", "end", iid=product.id, values=(
                "✓" if selection.is_selected(product.id) else "",
                product.title,
                product.status,
                main_image_name(product),
                len(product.images),
                len(product.variants),
                product.vendor,
                product.product_type,
            ))
        selection_label.config(
            text=f"{selection.count} of {pluralize(len(selection.products), 'product')} selected"
        )
        update_operation_panel()

    def load_products(collection, on_loaded=None, append=False):
        token = tracker.begin("products")
        cursor = view["products_cursor"] if append else None
        more_products_btn.config(state="disabled")
        product_frame.config(text=f'Products in "{collection.title}"')
        product_message.config(text="Loading products...", bootstyle="secondary")

        def on_success(page):
            if not tracker.is_current("products", token):
                logging.debug(f"Discarding stale products for collection {collection.id}")
                return
            view["collection"] = collection
            if append:
                selection.append_products(page.items)
            else:
                selection.load_collection(collection.id, page.items)
            view["products_cursor"] = page.end_cursor if page.has_next_page else None
            more_products_btn.config(state="normal" if view["products_cursor"] else "disabled")
            product_message.config(
                text="" if selection.products else "No products found in this collection.", bootstyle="secondary"
            )
            render_products()
            if on_loaded is not None:
                on_loaded()

        def on_error(e):
            if not tracker.is_current("products", token):
                return
            view["collection"] = collection
            if not append:
                selection.load_collection(collection.id, [])
                view["products_cursor"] = None
            more_products_btn.config(state="normal" if view["products_cursor"] else "disabled")
            render_products()
            product_message.config(text=str(e), bootstyle="danger")
            log_and_status(status, f"Failed to load products: {e}", level="error", ui_msg=f"❌ {e}")

        run_in_background(
            lambda: server_api.get_products_from_collection(
                collection.id, cfg, limit=cfg["PRODUCTS_PAGE_SIZE"], after=cursor
            ),
            on_success, on_error
        )

    def load_more_products():
        if view["collection"] is not None and view["products_cursor"]:
            load_products(view["collection"], append=True)

    def reload_products_after(operation):
        collection = view["collection"]
        update_operation_panel()
        if collection is None or collection.id != operation.collection_id:
            return

        def check_variant_images():
            for product in selection.products:
                for variant in product.orphaned_variants():
                    log_and_status(
                        status,
                        f"Variant {variant.id} of {product.title} references missing image {variant.image_id}",
                        level="warning",
                        ui_msg=f"⚠️ {product.title}: variant '{variant.title}' lost its image"
                    )

        load_products(collection, check_variant_images)

    def on_collection_selected(_event):
        selected = collection_tree.selection()
        if not selected:
            return
        collection = collections_by_id.get(selected[0])
        if collection is not None:
            load_products(collection)

    def on_product_click(event):
        row_id = product_tree.identify_row(event.y)
        if not row_id:
            return
        try:
            selection.toggle(row_id)
        except KeyError:
            return
        render_products()

    def open_in_storefront():
        focused = product_tree.focus()
        product = next((p for p in selection.products if p.id == focused), None)
        url = host_context.storefront_url(product.handle) if product else None
        if url:
            webbrowser.open(url)
        else:
            messagebox.showinfo("Storefront", "Select a product; the shop domain must be known (--shop).")

    def select_all():
        selection.select_all()
        render_products()

    def clear_all():
        selection.clear_all()
        render_products()

    collection_tree.bind("<<TreeviewSelect>>", on_collection_selected)
    product_tree.bind("<ButtonRelease-1>", on_product_click)
    more_products_btn.config(command=load_more_products)

    tb.Button(product_buttons, text="Clear All", command=clear_all, bootstyle="secondary-outline").pack(
        side="right", padx=5
    )
    tb.Button(product_buttons, text="Select All", command=select_all, bootstyle="primary-outline").pack(
        side="right", padx=5
    )
    storefront_btn = tb.Button(
        product_buttons, text="Open in Storefront", command=open_in_storefront, bootstyle="link"
    )
    storefront_btn.pack(side="right", padx=5)
    if not host_context.shop:
        storefront_btn.config(state="disabled")

    # Status log goes last so it sits at the bottom
    tb.Label(root_frame, text="Status Log:", anchor="w").pack(anchor="w", padx=10, pady=(10, 0))
    status_log.pack(fill="x", padx=10, pady=(0, 10))

    update_operation_panel()
    status(f"{SCRIPT_VERSION}")
    status(f"API: {cfg['API_BASE_URL']}")
