"""
Use Cases (Application Services) do Domínio de Atendimento.

FluxoAtendimentoService conduz a sessão de um operador, uma tarefa
ativa por vez:

    carregar_proxima → iniciar → encerrar_chamada → enviar
                  └──→ pular

Cada operação lê a sessão do SessaoStore, valida o estado, aplica a
mudança e grava a sessão de volta. Os cronômetros são amostrados do
relógio monotônico injetado; tick() apenas lê.

Use Cases implementados:
- FluxoAtendimentoService: Fluxo da sessão de atendimento
- ListarRegistrosChamadaService: Histórico de chamadas
"""

import copy
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from src.core.auditoria.ports import PerguntaAuditoriaRepository
from src.core.operadores.ports import OperadorRepository, carregar_ator
from src.core.protocolos.dtos import CriarProtocoloInputDTO
from src.core.protocolos.use_cases import CriarProtocoloService
from src.core.shared.exceptions import (
    ConcurrencyError,
    ConfigurationError,
    JustificativaObrigatoriaError,
    StateError,
    ValidationError,
)
from src.core.shared.interfaces import Clock, UnitOfWork

from .dtos import (
    ContatoDTO,
    EnviarAtendimentoInputDTO,
    PerguntaOutputDTO,
    RegistroChamadaOutputDTO,
    SessaoOutputDTO,
    TarefaOutputDTO,
)
from .entities import (
    MotivoPulo,
    OperadorEventoTipo,
    RegistroChamadaEntity,
    TarefaEntity,
    TarefaStatus,
)
from .events import AtendimentoFinalizadoEvent, AtendimentoPuladoEvent
from .ports import (
    ContatoRepository,
    OperadorEventoLogger,
    RegistroChamadaRepository,
    SessaoStore,
    TarefaRepository,
)
from .sessao import SessaoAtendimento, SessaoEstado


logger = logging.getLogger(__name__)


class FluxoAtendimentoService:
    """
    Use Case: Sessão de atendimento do operador.

    Example:
        fluxo = container.fluxo_atendimento_service()
        fluxo.carregar_proxima("op1")
        fluxo.iniciar("op1")
        # ... 42 segundos depois
        fluxo.encerrar_chamada("op1")
        fluxo.responder("op1", "pv3", "Sim", justificativa="Pediu orçamento")
        registro = fluxo.enviar(EnviarAtendimentoInputDTO("op1", "Cliente satisfeito"))
        print(registro.duracao_chamada)  # 42
    """

    def __init__(
        self,
        tarefa_repo: TarefaRepository,
        registro_repo: RegistroChamadaRepository,
        contato_repo: ContatoRepository,
        catalogo_repo: PerguntaAuditoriaRepository,
        operador_repo: OperadorRepository,
        evento_logger: OperadorEventoLogger,
        sessao_store: SessaoStore,
        uow: UnitOfWork,
        clock: Clock,
        criar_protocolo: Optional[CriarProtocoloService] = None,
        envio_timeout: int = 120,
    ):
        """
        Inicializa service com dependências injetadas.

        Args:
            criar_protocolo: Caminho de abertura de protocolo usado no
                escalonamento; sem ele, envios com escalonamento falham
                com ConfigurationError
            envio_timeout: Segundos após os quais um bloqueio de envio
                não liberado é considerado abandonado
        """
        self.tarefa_repo = tarefa_repo
        self.registro_repo = registro_repo
        self.contato_repo = contato_repo
        self.catalogo_repo = catalogo_repo
        self.operador_repo = operador_repo
        self.evento_logger = evento_logger
        self.sessao_store = sessao_store
        self.uow = uow
        self.clock = clock
        self.criar_protocolo = criar_protocolo
        self.envio_timeout = timedelta(seconds=envio_timeout)

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------

    def obter_sessao(self, operador_id: str) -> SessaoOutputDTO:
        """Fotografia da sessão atual (OCIOSA se não houver)."""
        return self._saida(self._sessao(operador_id))

    def tick(self, operador_id: str) -> int:
        """
        Amostra o cronômetro em execução.

        Chamado pela tela uma vez por segundo. Não altera a sessão.

        Returns:
            Segundos decorridos do cronômetro em exibição
        """
        return self._decorrido(self._sessao(operador_id))

    # ------------------------------------------------------------------
    # Transições
    # ------------------------------------------------------------------

    def carregar_proxima(self, operador_id: str) -> SessaoOutputDTO:
        """
        Carrega a tarefa pendente mais antiga do operador.

        Sem tarefa pendente, a sessão fica OCIOSA.

        Raises:
            StateError: Se já existe tarefa ativa na sessão
            AuthorizationError: Se operador desconhecido ou inativo
        """
        carregar_ator(self.operador_repo, operador_id)
        sessao = self._sessao(operador_id)
        if sessao.tem_tarefa_ativa:
            raise StateError(
                "Já existe um atendimento ativo nesta sessão",
                current_status=sessao.estado.value,
            )

        self._carregar(sessao)
        self.sessao_store.salvar(sessao)
        return self._saida(sessao)

    def iniciar(self, operador_id: str) -> SessaoOutputDTO:
        """
        PRONTA → EM_CHAMADA. Registra o início e dispara o cronômetro.

        Raises:
            StateError: Se não há tarefa pronta
        """
        sessao = self._sessao(operador_id)
        self._exigir_estado(sessao, {SessaoEstado.PRONTA}, "iniciar chamada")

        sessao.inicio = self.clock.agora()
        sessao.cronometro_chamada.iniciar(*self._leitura())
        sessao.estado = SessaoEstado.EM_CHAMADA
        self.sessao_store.salvar(sessao)

        self._registrar_evento(
            operador_id, OperadorEventoTipo.INICIAR_PROXIMO_ATENDIMENTO, sessao.tarefa.id
        )
        logger.info(f"Operador {operador_id} iniciou chamada da tarefa {sessao.tarefa.id}")
        return self._saida(sessao)

    def encerrar_chamada(self, operador_id: str) -> SessaoOutputDTO:
        """EM_CHAMADA → RELATORIO. Congela a duração da chamada."""
        sessao = self._sessao(operador_id)
        self._exigir_estado(sessao, {SessaoEstado.EM_CHAMADA}, "encerrar chamada")

        leitura = self._leitura()
        sessao.cronometro_chamada.parar(*leitura)
        sessao.fim_chamada = leitura[1]
        sessao.cronometro_relatorio.iniciar(*leitura)
        sessao.estado = SessaoEstado.RELATORIO
        self.sessao_store.salvar(sessao)
        return self._saida(sessao)

    def responder(
        self,
        operador_id: str,
        pergunta_id: str,
        valor: Optional[str],
        justificativa: Optional[str] = None,
    ) -> SessaoOutputDTO:
        """
        Registra (ou limpa, com valor vazio) a resposta de uma pergunta.

        A justificativa de upsell só é cobrada no envio.

        Raises:
            StateError: Fora de EM_CHAMADA/RELATORIO
            ValidationError: Pergunta fora do roteiro ou valor fora das opções
        """
        sessao = self._sessao(operador_id)
        self._exigir_estado(
            sessao, {SessaoEstado.EM_CHAMADA, SessaoEstado.RELATORIO}, "responder"
        )
        pergunta = self._pergunta(sessao, pergunta_id)

        if not valor:
            sessao.respostas.pop(pergunta.id, None)
        elif not pergunta.aceita(valor):
            raise ValidationError(
                f"Valor '{valor}' não é opção da pergunta {pergunta.id}",
                field=pergunta.id,
            )
        else:
            sessao.respostas[pergunta.id] = valor

        if justificativa is not None:
            sessao.justificativas[pergunta.id] = justificativa

        self.sessao_store.salvar(sessao)
        return self._saida(sessao)

    def justificar(self, operador_id: str, pergunta_id: str, nota: str) -> SessaoOutputDTO:
        """Define a nota pareada de uma pergunta (vazia remove)."""
        sessao = self._sessao(operador_id)
        self._exigir_estado(
            sessao, {SessaoEstado.EM_CHAMADA, SessaoEstado.RELATORIO}, "justificar"
        )
        pergunta = self._pergunta(sessao, pergunta_id)

        if nota and nota.strip():
            sessao.justificativas[pergunta.id] = nota
        else:
            sessao.justificativas.pop(pergunta.id, None)

        self.sessao_store.salvar(sessao)
        return self._saida(sessao)

    def enviar(self, input_dto: EnviarAtendimentoInputDTO) -> RegistroChamadaOutputDTO:
        """
        RELATORIO → ENVIADA, gravando o registro da chamada.

        Fluxo:
        1. Bloquear reentrada (processando_desde, com expiração)
        2. Exigir justificativa em toda pergunta de upsell respondida
        3. Congelar o cronômetro do relatório
        4. Abrir protocolo, se pedido, pelo caminho normal de abertura
        5. Gravar registro e concluir a tarefa (condicional)
        6. Emitir FINALIZAR_ATENDIMENTO, zerar sessão e carregar a próxima

        Nada é gravado se qualquer passo falhar. A sessão guardada só
        perde o bloqueio e o envio pode ser repetido; se a tarefa já foi
        consumida por outra operação, a sessão carrega a próxima.

        Raises:
            StateError: Fora de RELATORIO ou envio já em andamento
            JustificativaObrigatoriaError: Upsell sem justificativa
            ConcurrencyError: Tarefa consumida por outra operação
        """
        operador_id = input_dto.operador_id
        ator = carregar_ator(self.operador_repo, operador_id)
        sessao = self._sessao(operador_id)
        self._exigir_estado(sessao, {SessaoEstado.RELATORIO}, "enviar relatório")
        if sessao.envio_em_andamento(self.clock.agora(), self.envio_timeout):
            raise StateError("Envio já em andamento", current_status=sessao.estado.value)
        if sessao.processando_desde is not None:
            logger.warning(
                f"Bloqueio de envio expirado na sessão de {operador_id}; liberando"
            )

        pendentes = sessao.justificativas_pendentes()
        if pendentes:
            raise JustificativaObrigatoriaError(pendentes)

        if input_dto.escalonamento is not None and self.criar_protocolo is None:
            raise ConfigurationError("Escalonamento para protocolo não configurado")

        sessao.processando_desde = self.clock.agora()
        self.sessao_store.salvar(sessao)

        tarefa_id = sessao.tarefa.id
        try:
            registro, protocolo_numero = self._gravar_envio(sessao, ator.id, input_dto)
        except ConcurrencyError:
            self._liberar_envio(operador_id, tarefa_id, tarefa_consumida=True)
            raise
        except Exception:
            self._liberar_envio(operador_id, tarefa_id)
            raise

        self._registrar_evento(
            operador_id, OperadorEventoTipo.FINALIZAR_ATENDIMENTO, registro.tarefa_id
        )
        logger.info(
            f"Atendimento da tarefa {registro.tarefa_id} finalizado por {operador_id} "
            f"({registro.duracao_chamada}s em chamada)"
        )

        self._carregar(sessao)
        self.sessao_store.salvar(sessao)

        return RegistroChamadaOutputDTO.from_entity(registro, protocolo_numero)

    def pular(self, operador_id: str, motivo: str) -> SessaoOutputDTO:
        """
        PRONTA → PULADA. Marca a tarefa com o motivo e carrega a próxima.

        Nenhum registro de chamada é produzido.

        Raises:
            StateError: Fora de PRONTA
            ValidationError: Motivo fora do conjunto fechado
        """
        carregar_ator(self.operador_repo, operador_id)
        sessao = self._sessao(operador_id)
        self._exigir_estado(sessao, {SessaoEstado.PRONTA}, "pular")

        try:
            motivo_pulo = MotivoPulo.from_string(motivo or "")
        except ValueError:
            raise ValidationError(f"Motivo de pulo inválido: {motivo}", field="motivo")

        tarefa = sessao.tarefa
        with self.uow:
            tarefa.pular(motivo_pulo)
            self.tarefa_repo.update(tarefa, TarefaStatus.PENDENTE)
            self.uow.publish_event(
                AtendimentoPuladoEvent(
                    aggregate_id=tarefa.id,
                    operador_id=operador_id,
                    tipo_chamada=tarefa.tipo_chamada.value,
                    motivo=motivo_pulo.value,
                )
            )

        self._registrar_evento(
            operador_id, OperadorEventoTipo.PULAR_ATENDIMENTO, tarefa.id, motivo_pulo.value
        )
        logger.info(f"Tarefa {tarefa.id} pulada por {operador_id}: {motivo_pulo.value}")

        self._carregar(sessao)
        self.sessao_store.salvar(sessao)
        return self._saida(sessao)

    def cancelar(self, operador_id: str) -> SessaoOutputDTO:
        """
        Descarta a sessão sem gravar nada.

        A tarefa continua pendente e volta no próximo carregar_proxima.
        Um bloqueio de envio expirado não impede o descarte.
        """
        sessao = self._sessao(operador_id)
        if sessao.envio_em_andamento(self.clock.agora(), self.envio_timeout):
            raise StateError("Envio em andamento", current_status=sessao.estado.value)

        self.sessao_store.descartar(operador_id)
        logger.debug(f"Sessão de {operador_id} descartada em {sessao.estado.value}")
        return self._saida(SessaoAtendimento(operador_id=operador_id))

    # ------------------------------------------------------------------
    # Auxiliares
    # ------------------------------------------------------------------

    def _sessao(self, operador_id: str) -> SessaoAtendimento:
        if not operador_id:
            raise ValidationError("Operador é obrigatório", field="operador_id")
        return self.sessao_store.obter(operador_id) or SessaoAtendimento(operador_id=operador_id)

    def _carregar(self, sessao: SessaoAtendimento) -> None:
        sessao.resetar()
        tarefa = self.tarefa_repo.get_pending_for_operador(sessao.operador_id)
        if tarefa is None:
            logger.debug(f"Nenhuma tarefa pendente para {sessao.operador_id}")
            return

        sessao.tarefa = tarefa
        sessao.contato = self._contato(tarefa)
        sessao.perguntas = tuple(
            p for p in self.catalogo_repo.list_by_tipo_chamada(tarefa.tipo_chamada)
            if not p.confirmacao_fechamento
        )
        sessao.estado = SessaoEstado.PRONTA

    def _contato(self, tarefa: TarefaEntity) -> Optional[ContatoDTO]:
        if tarefa.cliente_id:
            contato = self.contato_repo.get_cliente(tarefa.cliente_id)
        else:
            contato = self.contato_repo.get_prospect(tarefa.prospect_id)
        if contato is None:
            logger.warning(f"Contato da tarefa {tarefa.id} não encontrado")
        return contato

    def _gravar_envio(
        self,
        sessao: SessaoAtendimento,
        ator_id: str,
        input_dto: EnviarAtendimentoInputDTO,
    ):
        # Cópia de trabalho: a sessão não muda antes do commit
        tarefa = copy.deepcopy(sessao.tarefa)
        leitura = self._leitura()
        fim = leitura[1]
        duracao_chamada = sessao.cronometro_chamada.amostrar(*leitura)
        duracao_relatorio = sessao.cronometro_relatorio.amostrar(*leitura)

        with self.uow:
            protocolo_id = None
            protocolo_numero = None
            escalonamento = input_dto.escalonamento
            if escalonamento is not None:
                protocolo = self.criar_protocolo.execute(
                    CriarProtocoloInputDTO(
                        ator_id=ator_id,
                        titulo=escalonamento.titulo,
                        descricao=escalonamento.descricao,
                        departamento_id=escalonamento.departamento_id,
                        prioridade=escalonamento.prioridade,
                        cliente_id=tarefa.cliente_id,
                        prospect_id=tarefa.prospect_id,
                        responsavel_id=escalonamento.responsavel_id,
                        origem_tipo_chamada=tarefa.tipo_chamada.value,
                    )
                )
                protocolo_id = protocolo.id
                protocolo_numero = protocolo.numero

            registro = RegistroChamadaEntity(
                tarefa_id=tarefa.id,
                operador_id=ator_id,
                tipo_chamada=tarefa.tipo_chamada,
                inicio=sessao.inicio,
                fim=fim,
                duracao_chamada=duracao_chamada,
                duracao_relatorio=duracao_relatorio,
                respostas=sessao.respostas_ordenadas(),
                justificativas=sessao.justificativas_preenchidas(),
                resumo=(input_dto.resumo or "").strip(),
                cliente_id=tarefa.cliente_id,
                prospect_id=tarefa.prospect_id,
                protocolo_id=protocolo_id,
            )
            self.registro_repo.add(registro)

            tarefa.concluir()
            self.tarefa_repo.update(tarefa, TarefaStatus.PENDENTE)

            self.uow.publish_event(
                AtendimentoFinalizadoEvent(
                    aggregate_id=registro.id,
                    tarefa_id=tarefa.id,
                    operador_id=ator_id,
                    tipo_chamada=tarefa.tipo_chamada.value,
                    duracao_chamada=registro.duracao_chamada,
                    duracao_relatorio=registro.duracao_relatorio,
                    protocolo_id=protocolo_id,
                )
            )

        return registro, protocolo_numero

    def _liberar_envio(
        self, operador_id: str, tarefa_id: str, tarefa_consumida: bool = False
    ) -> None:
        """
        Solta o bloqueio de envio depois de uma falha.

        Relê a sessão guardada em vez de regravar a cópia em memória:
        se outra operação já avançou a sessão para outra tarefa, nada
        muda. Com a tarefa consumida, a sessão carrega a próxima.
        """
        atual = self.sessao_store.obter(operador_id)
        if atual is None or atual.tarefa is None or atual.tarefa.id != tarefa_id:
            return

        if tarefa_consumida:
            logger.warning(
                f"Tarefa {tarefa_id} consumida por outra operação; "
                f"sessão de {operador_id} recarregada"
            )
            self._carregar(atual)
        else:
            atual.processando_desde = None
        self.sessao_store.salvar(atual)

    def _registrar_evento(
        self,
        operador_id: str,
        tipo: OperadorEventoTipo,
        tarefa_id: Optional[str],
        detalhe: Optional[str] = None,
    ) -> None:
        try:
            self.evento_logger.registrar(operador_id, tipo, tarefa_id, detalhe)
        except Exception as e:
            logger.warning(f"Falha ao registrar {tipo.value} de {operador_id}: {e}")

    @staticmethod
    def _exigir_estado(sessao: SessaoAtendimento, permitidos: set, acao: str) -> None:
        if sessao.estado not in permitidos:
            raise StateError(
                f"Não é possível {acao} no estado {sessao.estado.value}",
                current_status=sessao.estado.value,
            )

    @staticmethod
    def _pergunta(sessao: SessaoAtendimento, pergunta_id: str):
        pergunta = sessao.pergunta(pergunta_id)
        if pergunta is None:
            raise ValidationError(
                f"Pergunta {pergunta_id} não pertence ao roteiro desta chamada",
                field="pergunta_id",
            )
        return pergunta

    def _leitura(self) -> Tuple[float, datetime, str]:
        """Monotônico, parede e origem lidos juntos."""
        return self.clock.monotonic(), self.clock.agora(), self.clock.origem()

    def _decorrido(self, sessao: SessaoAtendimento) -> int:
        leitura = self._leitura()
        if sessao.estado == SessaoEstado.EM_CHAMADA:
            return sessao.cronometro_chamada.amostrar(*leitura)
        if sessao.estado == SessaoEstado.RELATORIO:
            return sessao.cronometro_relatorio.amostrar(*leitura)
        return 0

    def _saida(self, sessao: SessaoAtendimento) -> SessaoOutputDTO:
        duracao = sessao.cronometro_chamada.congelado
        return SessaoOutputDTO(
            operador_id=sessao.operador_id,
            estado=sessao.estado.value,
            tarefa=TarefaOutputDTO.from_entity(sessao.tarefa) if sessao.tarefa else None,
            contato=sessao.contato,
            perguntas=[PerguntaOutputDTO.from_entity(p) for p in sessao.perguntas],
            respostas=dict(sessao.respostas),
            justificativas=dict(sessao.justificativas),
            justificativas_pendentes=sessao.justificativas_pendentes(),
            inicio=sessao.inicio,
            duracao_chamada=duracao,
            decorrido=self._decorrido(sessao),
        )


class ListarRegistrosChamadaService:
    """
    Use Case: Histórico de chamadas.

    Administradores consultam qualquer operador; demais, só as próprias.
    """

    def __init__(
        self,
        registro_repo: RegistroChamadaRepository,
        operador_repo: OperadorRepository,
    ):
        self.registro_repo = registro_repo
        self.operador_repo = operador_repo

    def execute(
        self,
        ator_id: str,
        operador_id: Optional[str] = None,
        tarefa_id: Optional[str] = None,
    ) -> List[RegistroChamadaOutputDTO]:
        ator = carregar_ator(self.operador_repo, ator_id)
        if not ator.e_administrador:
            operador_id = ator.id

        registros = self.registro_repo.list(operador_id=operador_id, tarefa_id=tarefa_id)
        return [RegistroChamadaOutputDTO.from_entity(r) for r in registros]
